"""
Integration tests for the JSON endpoints.
Tenant comes from the session; errors render as {'status': 'error', 'message', 'error'}.
"""

import pytest
from decimal import Decimal

from app.models import StockItemKind


class TestTenantRequired:

    def test_anonymous_request_is_rejected(self, client, session):
        response = client.get('/inventory/raw-materials/movements')
        assert response.status_code == 401
        assert response.get_json()['status'] == 'error'

    def test_unknown_inventory_kind(self, authenticated_client):
        response = authenticated_client.get('/inventory/widgets/movements')
        assert response.status_code == 404


class TestMovementEndpoints:

    def test_record_and_list(self, authenticated_client, raw_material):
        material_id = raw_material.id

        response = authenticated_client.post('/inventory/raw-materials/movements', json={
            'stock_item_id': material_id, 'type': 'purchase', 'quantity': '100', 'unit': 'kg'
        })
        assert response.status_code == 201
        created = response.get_json()
        assert created['type'] == 'purchase'
        assert Decimal(created['quantity']) == Decimal('100')

        response = authenticated_client.post('/inventory/raw-materials/movements', json={
            'stock_item_id': material_id, 'type': 'production_usage', 'quantity': 30, 'unit': 'kg'
        })
        assert response.status_code == 201
        assert Decimal(response.get_json()['quantity']) == Decimal('-30')

        items = authenticated_client.get('/inventory/raw-materials/movements').get_json()['items']
        assert [i['type'] for i in items] == ['production_usage', 'purchase']

        filtered = authenticated_client.get(
            f'/inventory/raw-materials/movements?stock_item_id={material_id}&type=purchase'
        ).get_json()['items']
        assert len(filtered) == 1

        detail = authenticated_client.get(f"/inventory/raw-materials/movements/{created['id']}")
        assert detail.status_code == 200
        assert detail.get_json()['id'] == created['id']

        balances = authenticated_client.get('/inventory/raw-materials/balances').get_json()['items']
        assert len(balances) == 1
        assert Decimal(balances[0]['quantity']) == Decimal('70')

    def test_insufficient_stock_is_409(self, authenticated_client, raw_material):
        material_id = raw_material.id
        response = authenticated_client.post('/inventory/raw-materials/movements', json={
            'stock_item_id': material_id, 'type': 'production_usage', 'quantity': 5, 'unit': 'kg'
        })
        body = response.get_json()
        assert response.status_code == 409
        assert body['error'] == 'InsufficientStockError'
        assert body['available'] == '0'

    @pytest.mark.parametrize('payload,status', [
        ({'type': 'purchase', 'quantity': 1, 'unit': 'kg'}, 400),
        ({'stock_item_id': 'abc', 'type': 'purchase', 'quantity': 1, 'unit': 'kg'}, 400),
        ({'stock_item_id': 987654, 'type': 'purchase', 'quantity': 1, 'unit': 'kg'}, 404),
        ({'stock_item_id': None, 'type': 'sale', 'quantity': 1, 'unit': 'kg'}, 400),
    ])
    def test_invalid_requests(self, authenticated_client, payload, status):
        response = authenticated_client.post('/inventory/raw-materials/movements', json=payload)
        assert response.status_code == status

    def test_wrong_type_for_kind(self, authenticated_client, product):
        product_id = product.id
        response = authenticated_client.post('/inventory/finished-products/movements', json={
            'stock_item_id': product_id, 'type': 'purchase', 'quantity': 1, 'unit': 'unidades'
        })
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidMovementTypeError'

    def test_foreign_item_is_403(self, authenticated_client, raw_material_tenant2):
        foreign_id = raw_material_tenant2.id
        response = authenticated_client.post('/inventory/raw-materials/movements', json={
            'stock_item_id': foreign_id, 'type': 'purchase', 'quantity': 1, 'unit': 'kg'
        })
        assert response.status_code == 403


class TestBalanceEndpoints:

    def test_create_and_get(self, authenticated_client, product):
        product_id = product.id

        response = authenticated_client.post('/inventory/finished-products/balances', json={
            'stock_item_id': product_id, 'quantity': 12, 'unit': 'unidades'
        })
        assert response.status_code == 201
        balance = response.get_json()

        detail = authenticated_client.get(f"/inventory/finished-products/balances/{balance['id']}")
        assert detail.status_code == 200
        assert Decimal(detail.get_json()['quantity']) == Decimal('12')

        again = authenticated_client.post('/inventory/finished-products/balances', json={
            'stock_item_id': product_id, 'quantity': 1, 'unit': 'unidades'
        })
        assert again.status_code == 409

        movements = authenticated_client.get('/inventory/finished-products/movements').get_json()['items']
        assert [m['type'] for m in movements] == ['initial_load']


class TestProductionEndpoints:

    def test_create_list_get(self, authenticated_client, session, tenant1, raw_material, product, stock):
        tenant_id, material_id, product_id = tenant1.id, raw_material.id, product.id
        stock(tenant_id, StockItemKind.RAW_MATERIAL, material_id, 70, 'kg')

        response = authenticated_client.post('/productions/', json={
            'production_date': '2024-05-10',
            'batch_code': 'B1',
            'materials': [{'raw_material_id': material_id, 'quantity': 10, 'unit': 'kg'}],
            'products': [{'product_id': product_id, 'quantity': 5, 'unit': 'unidades'}],
        })
        assert response.status_code == 201
        production = response.get_json()
        assert production['status'] == 'completed'
        assert production['materials'][0]['raw_material_id'] == material_id
        assert production['products'][0]['product_id'] == product_id

        listing = authenticated_client.get('/productions/').get_json()['items']
        assert [p['id'] for p in listing] == [production['id']]

        detail = authenticated_client.get(f"/productions/{production['id']}")
        assert detail.status_code == 200
        assert detail.get_json()['batch_code'] == 'B1'

    def test_shortage_is_409(self, authenticated_client, raw_material, product):
        material_id, product_id = raw_material.id, product.id
        response = authenticated_client.post('/productions/', json={
            'production_date': '2024-05-10',
            'materials': [{'raw_material_id': material_id, 'quantity': 10, 'unit': 'kg'}],
            'products': [{'product_id': product_id, 'quantity': 5, 'unit': 'unidades'}],
        })
        assert response.status_code == 409
        assert authenticated_client.get('/productions/').get_json()['items'] == []

    def test_missing_production_is_404(self, authenticated_client):
        response = authenticated_client.get('/productions/987654')
        assert response.status_code == 404

    def test_empty_products_is_400(self, authenticated_client):
        response = authenticated_client.post('/productions/', json={
            'production_date': '2024-05-10', 'materials': [], 'products': []
        })
        assert response.status_code == 400


class TestMetricsEndpoint:

    def test_exposes_inventory_counters(self, client, session):
        response = client.get('/metrics')
        assert response.status_code == 200
        assert b'stock_movements_total' in response.data
