"""Integration tests for the balance projection accessors."""

import pytest
from decimal import Decimal

from app.exceptions import ConflictError, ForbiddenError, NotFoundError, InvalidQuantityError
from app.models import (
    StockItemKind, InventoryRawMaterialMovement, RawMaterialMovementType, InventoryFinishedProductMovement
)
from app.services.inventory_service import (
    create_balance, get_balance, list_balances, get_stock_summary, upsert_balance, find_balance
)

RAW = StockItemKind.RAW_MATERIAL
FINISHED = StockItemKind.FINISHED_PRODUCT


class TestCreateBalance:

    def test_initial_quantity_is_recorded_in_ledger(self, session, tenant1, raw_material):
        balance = create_balance(session, RAW, tenant1.id, raw_material.id, '25.5', 'kg')

        assert balance.quantity == Decimal('25.5')
        movements = session.query(InventoryRawMaterialMovement).all()
        assert len(movements) == 1
        assert movements[0].type is RawMaterialMovementType.INITIAL_LOAD
        assert movements[0].quantity == Decimal('25.5')

    def test_zero_balance_without_movement(self, session, tenant1, product):
        balance = create_balance(session, FINISHED, tenant1.id, product.id, 0, 'unidades')

        assert balance.quantity == Decimal('0')
        assert session.query(InventoryFinishedProductMovement).count() == 0

    def test_duplicate_is_conflict(self, session, tenant1, raw_material, stock):
        stock(tenant1.id, RAW, raw_material.id, 5, 'kg')
        with pytest.raises(ConflictError) as exc:
            create_balance(session, RAW, tenant1.id, raw_material.id, 10, 'kg')
        assert exc.value.status_code == 409
        assert find_balance(session, RAW, tenant1.id, raw_material.id).quantity == Decimal('5')

    def test_negative_initial_quantity(self, session, tenant1, raw_material):
        with pytest.raises(InvalidQuantityError):
            create_balance(session, RAW, tenant1.id, raw_material.id, -1, 'kg')

    def test_foreign_item(self, session, tenant1, raw_material_tenant2):
        with pytest.raises(ForbiddenError):
            create_balance(session, RAW, tenant1.id, raw_material_tenant2.id, 1, 'kg')


class TestBalanceQueries:

    def test_get_balance(self, session, tenant1, tenant2, raw_material, stock):
        stock(tenant1.id, RAW, raw_material.id, 5, 'kg')
        balance = find_balance(session, RAW, tenant1.id, raw_material.id)

        assert get_balance(session, RAW, balance.id, tenant1.id).stock_item_id == raw_material.id

        with pytest.raises(ForbiddenError):
            get_balance(session, RAW, balance.id, tenant2.id)
        with pytest.raises(NotFoundError):
            get_balance(session, RAW, 987654, tenant1.id)

    def test_list_is_tenant_scoped(
        self, session, tenant1, tenant2, raw_material, raw_material_tenant2, stock
    ):
        stock(tenant1.id, RAW, raw_material.id, 5, 'kg')
        stock(tenant2.id, RAW, raw_material_tenant2.id, 9, 'kg')

        balances = list_balances(session, RAW, tenant1.id)
        assert len(balances) == 1
        assert balances[0].tenant_id == tenant1.id

        assert list_balances(session, RAW, tenant1.id, stock_item_id=raw_material_tenant2.id) == []

    def test_stock_summary_without_cache(self, session, tenant1, raw_material, stock):
        stock(tenant1.id, RAW, raw_material.id, '7.25', 'kg')

        summary = get_stock_summary(session, RAW, tenant1.id)

        assert len(summary) == 1
        assert summary[0]['stock_item_id'] == raw_material.id
        assert Decimal(summary[0]['quantity']) == Decimal('7.25')
        assert summary[0]['unit'] == 'kg'


class TestUpsertBalance:

    def test_replaces_quantity_without_increment(self, session, tenant1, raw_material):
        upsert_balance(session, RAW, tenant1.id, raw_material.id, Decimal('4'), 'kg')
        upsert_balance(session, RAW, tenant1.id, raw_material.id, Decimal('9'), 'kg')
        session.commit()

        assert find_balance(session, RAW, tenant1.id, raw_material.id).quantity == Decimal('9')
