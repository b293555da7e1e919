"""JSON-ready dict renderers for inventory rows."""
from decimal import Decimal


def _qty(value):
    """Quantities travel as strings so no precision is lost."""
    if value is None:
        return None
    return str(Decimal(str(value)))


def _iso(value):
    return value.isoformat() if value else None


def balance_to_dict(balance) -> dict:
    return {
        'id': balance.id,
        'tenant_id': balance.tenant_id,
        'stock_item_id': balance.stock_item_id,
        'quantity': _qty(balance.quantity),
        'unit': balance.unit,
        'updated_at': _iso(balance.updated_at),
    }


def movement_to_dict(movement) -> dict:
    return {
        'id': movement.id,
        'tenant_id': movement.tenant_id,
        'stock_item_id': movement.stock_item_id,
        'type': movement.type.value,
        'quantity': _qty(movement.quantity),
        'unit': movement.unit,
        'reference_id': movement.reference_id,
        'notes': movement.notes,
        'created_at': _iso(movement.created_at),
    }


def production_to_dict(production) -> dict:
    """Production header with its material and product lines."""
    return {
        'id': production.id,
        'tenant_id': production.tenant_id,
        'production_date': _iso(production.production_date),
        'batch_code': production.batch_code,
        'notes': production.notes,
        'status': production.status.value,
        'created_at': _iso(production.created_at),
        'materials': [
            {
                'raw_material_id': line.raw_material_id,
                'quantity': _qty(line.quantity),
                'unit': line.unit,
            }
            for line in production.materials
        ],
        'products': [
            {
                'product_id': line.product_id,
                'quantity': _qty(line.quantity),
                'unit': line.unit,
            }
            for line in production.products
        ],
    }
