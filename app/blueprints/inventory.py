"""Inventory blueprint - balances and movement ledger (JSON, Multi-Tenant)."""
from typing import Optional

from flask import Blueprint, request, jsonify, g

from app.database import get_session
from app.exceptions import InvalidInputError, NotFoundError
from app.middleware import require_tenant
from app.models import StockItemKind
from app.services import inventory_service, movement_service
from app.services.movement_service import MovementFilters
from app.utils.serializers import balance_to_dict, movement_to_dict

inventory_bp = Blueprint('inventory', __name__, url_prefix='/inventory')

KIND_SLUGS = {
    'raw-materials': StockItemKind.RAW_MATERIAL,
    'finished-products': StockItemKind.FINISHED_PRODUCT,
}


def _resolve_kind(slug: str) -> StockItemKind:
    kind = KIND_SLUGS.get(slug)
    if kind is None:
        raise NotFoundError(f'Tipo de inventario desconocido: {slug}')
    return kind


def _parse_int(value, field: str) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f'{field} debe ser un número entero', payload={'field': field})


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError('Se esperaba un cuerpo JSON')
    return data


@inventory_bp.route('/<kind>/movements', methods=['GET'])
@require_tenant
def list_movements(kind):
    """List movements (tenant-scoped), optionally ?stock_item_id=&type=."""
    stock_kind = _resolve_kind(kind)
    filters = MovementFilters(
        stock_item_id=_parse_int(request.args.get('stock_item_id'), 'stock_item_id'),
        movement_type=request.args.get('type') or None
    )
    movements = movement_service.list_movements(get_session(), stock_kind, g.tenant_id, filters)
    return jsonify({'items': [movement_to_dict(m) for m in movements]})


@inventory_bp.route('/<kind>/movements', methods=['POST'])
@require_tenant
def create_movement(kind):
    stock_kind = _resolve_kind(kind)
    data = _json_body()

    stock_item_id = _parse_int(data.get('stock_item_id'), 'stock_item_id')
    if stock_item_id is None:
        raise InvalidInputError('stock_item_id es requerido')

    movement = movement_service.record_movement(
        get_session(),
        g.tenant_id,
        stock_kind,
        stock_item_id,
        data.get('type'),
        data.get('quantity'),
        data.get('unit'),
        reference_id=data.get('reference_id'),
        notes=data.get('notes')
    )
    return jsonify(movement_to_dict(movement)), 201


@inventory_bp.route('/<kind>/movements/<movement_id>', methods=['GET'])
@require_tenant
def get_movement(kind, movement_id):
    stock_kind = _resolve_kind(kind)
    movement = movement_service.get_movement(get_session(), stock_kind, movement_id, g.tenant_id)
    return jsonify(movement_to_dict(movement))


@inventory_bp.route('/<kind>/balances', methods=['GET'])
@require_tenant
def list_balances(kind):
    """Current stock (tenant-scoped). The unfiltered listing is served from cache."""
    stock_kind = _resolve_kind(kind)
    stock_item_id = _parse_int(request.args.get('stock_item_id'), 'stock_item_id')
    db_session = get_session()

    if stock_item_id is not None:
        items = [
            balance_to_dict(b)
            for b in inventory_service.list_balances(db_session, stock_kind, g.tenant_id, stock_item_id)
        ]
    else:
        items = inventory_service.get_stock_summary(db_session, stock_kind, g.tenant_id)

    return jsonify({'items': items})


@inventory_bp.route('/<kind>/balances', methods=['POST'])
@require_tenant
def create_balance(kind):
    stock_kind = _resolve_kind(kind)
    data = _json_body()

    stock_item_id = _parse_int(data.get('stock_item_id'), 'stock_item_id')
    if stock_item_id is None:
        raise InvalidInputError('stock_item_id es requerido')

    balance = inventory_service.create_balance(
        get_session(),
        stock_kind,
        g.tenant_id,
        stock_item_id,
        data.get('quantity', 0),
        data.get('unit')
    )
    return jsonify(balance_to_dict(balance)), 201


@inventory_bp.route('/<kind>/balances/<int:balance_id>', methods=['GET'])
@require_tenant
def get_balance(kind, balance_id):
    stock_kind = _resolve_kind(kind)
    balance = inventory_service.get_balance(get_session(), stock_kind, balance_id, g.tenant_id)
    return jsonify(balance_to_dict(balance))
