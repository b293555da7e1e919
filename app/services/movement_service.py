"""
Inventory movement service with transactional logic - Multi-Tenant.

A movement is one signed entry in the append-only stock ledger. Recording it
validates the tenant and stock item, resolves the polarity of its type, checks
that the balance will not go negative, and writes the ledger row and the new
balance in the same transaction.

Two entry points share the same logic:
    - record_movement(): standalone, opens and commits its own transaction
    - apply_movement(): runs inside the caller's transaction (productions)
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import List, Optional
import logging

from flask import current_app, has_app_context

from app.exceptions import (
    InvalidInputError, InvalidQuantityError, InsufficientStockError,
    NotFoundError, ForbiddenError
)
from app.metrics import stock_movements_total, insufficient_stock_total
from app.services.concurrency import run_with_retry
from app.services.directory_service import get_tenant, get_stock_item
from app.services.inventory_service import find_balance, upsert_balance
from app.services.movement_types import (
    get_stock_kind, parse_movement_type, compute_delta, is_adjustment
)

logger = logging.getLogger(__name__)

QUANTITY_STEP = Decimal('0.001')


@dataclass
class MovementFilters:
    """Optional filters for ledger listings."""
    stock_item_id: Optional[int] = None
    movement_type: Optional[str] = None


def parse_quantity(value, allow_zero: bool = False) -> Decimal:
    """Convert user input to Decimal, rejecting non-numeric and zero values."""
    if isinstance(value, bool) or value is None:
        raise InvalidQuantityError('La cantidad es requerida')
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidQuantityError(f'Cantidad inválida: {value}')
    if not quantity.is_finite():
        raise InvalidQuantityError(f'Cantidad inválida: {value}')
    # Ledger and balance columns are Numeric(14, 3)
    try:
        exact = quantity == quantity.quantize(QUANTITY_STEP)
    except InvalidOperation:
        exact = False
    if not exact:
        raise InvalidQuantityError(f'Cantidad inválida: {value} (máximo 3 decimales)')
    if quantity == 0 and not allow_zero:
        raise InvalidQuantityError('La cantidad no puede ser 0')
    return quantity


def validate_unit(unit) -> str:
    if not unit or not str(unit).strip():
        raise InvalidInputError('La unidad de medida es requerida')
    return str(unit).strip()


def retry_settings() -> dict:
    """Retry policy from app config (defaults outside an app context)."""
    config = current_app.config if has_app_context() else {}
    return {
        'attempts': config.get('DB_RETRY_ATTEMPTS', 3),
        'backoff_base': config.get('DB_RETRY_BACKOFF', 0.1),
    }


def apply_movement(
    session,
    tenant_id: int,
    kind,
    stock_item_id: int,
    movement_type,
    quantity,
    unit: str,
    reference_id: Optional[str] = None,
    notes: Optional[str] = None,
):
    """
    Validate and write one movement without committing.

    Steps:
        1. Resolve polarity of the movement type for this stock item kind
        2. Validate quantity (never 0; > 0 except for adjustments)
        3. Validate tenant and stock item ownership
        4. Lock the current balance (missing balance = 0)
        5. Reject if the new quantity would be negative
        6. Insert the signed movement and upsert the balance

    Args:
        session: SQLAlchemy session (the transactional context)
        tenant_id: Tenant ID (REQUIRED for multi-tenant enforcement)
        kind: StockItemKind
        movement_type: enum member or its string value
        quantity: requested quantity (signed only for adjustments)

    Returns:
        The new movement row (flushed, not committed)

    Raises:
        InvalidMovementTypeError, InvalidQuantityError, NotFoundError,
        ForbiddenError, InsufficientStockError, ConflictError
    """
    models = get_stock_kind(kind)
    member = parse_movement_type(models.kind, movement_type)
    quantity = parse_quantity(quantity)
    unit = validate_unit(unit)

    if not is_adjustment(member) and quantity <= 0:
        raise InvalidQuantityError('La cantidad debe ser mayor a 0')

    delta = compute_delta(models.kind, member, quantity)

    get_tenant(session, tenant_id)
    item = get_stock_item(session, models.kind, stock_item_id, tenant_id)

    balance = find_balance(session, models.kind, tenant_id, stock_item_id, lock=True)
    current_qty = Decimal(str(balance.quantity)) if balance else Decimal('0')
    new_qty = current_qty + delta

    if new_qty < 0:
        insufficient_stock_total.labels(stock_item_kind=models.kind.value).inc()
        raise InsufficientStockError(
            item.name, abs(quantity), current_qty, unit=unit, stock_item_id=stock_item_id
        )

    movement = models.movement_model(
        tenant_id=tenant_id,
        stock_item_id=stock_item_id,
        type=member,
        quantity=delta,  # Stored signed (+ entry, - exit)
        unit=unit,
        reference_id=reference_id,
        notes=notes,
        created_at=datetime.now()
    )
    session.add(movement)

    upsert_balance(session, models.kind, tenant_id, stock_item_id, new_qty, unit)

    logger.debug(
        f"[MOVEMENT] tenant={tenant_id} {models.kind.value}={stock_item_id} "
        f"type={member.value} delta={delta} balance={current_qty}->{new_qty}"
    )
    return movement


def record_movement(
    session,
    tenant_id: int,
    kind,
    stock_item_id: int,
    movement_type,
    quantity,
    unit: str,
    reference_id: Optional[str] = None,
    notes: Optional[str] = None,
):
    """
    Record a standalone movement in its own transaction.

    Either both the movement row and the balance update are committed or
    neither is. Lock timeouts and deadlocks are retried from scratch.
    """
    def _op():
        try:
            movement = apply_movement(
                session, tenant_id, kind, stock_item_id, movement_type,
                quantity, unit, reference_id=reference_id, notes=notes
            )
            session.commit()
            return movement
        except Exception:
            session.rollback()
            raise

    movement = run_with_retry(session, _op, **retry_settings())

    models = get_stock_kind(kind)
    stock_movements_total.labels(
        stock_item_kind=models.kind.value, movement_type=movement.type.value
    ).inc()
    logger.info(
        f"[MOVEMENT] Recorded {movement.type.value} {movement.quantity} {movement.unit} "
        f"for {models.kind.value} {stock_item_id} (tenant {tenant_id})"
    )

    from app.services.cache_service import invalidate_inventory_cache
    invalidate_inventory_cache(tenant_id)
    return movement


def list_movements(session, kind, tenant_id: int, filters: Optional[MovementFilters] = None) -> List:
    """List a tenant's movements newest first, optionally by stock item and type."""
    models = get_stock_kind(kind)
    model = models.movement_model
    query = session.query(model).filter(model.tenant_id == tenant_id)

    if filters and filters.stock_item_id is not None:
        query = query.filter(model.stock_item_id == filters.stock_item_id)

    if filters and filters.movement_type:
        member = parse_movement_type(models.kind, filters.movement_type)
        query = query.filter(model.type == member)

    return query.order_by(model.created_at.desc(), model.id.desc()).all()


def get_movement(session, kind, movement_id: str, tenant_id: int):
    """
    Return one movement.

    Raises:
        NotFoundError: if it does not exist
        ForbiddenError: if it belongs to another tenant
    """
    model = get_stock_kind(kind).movement_model
    movement = session.query(model).filter(model.id == movement_id).first()

    if not movement:
        raise NotFoundError(f'Movimiento con ID {movement_id} no encontrado')

    if movement.tenant_id != tenant_id:
        raise ForbiddenError('Acceso denegado a este movimiento')

    return movement


def register_production_consumption(
    session, tenant_id: int, raw_material_id: int, quantity, unit: str,
    production_id, notes: Optional[str] = None
):
    """Record a production_usage exit for a single raw material."""
    models = get_stock_kind('raw_material')
    return record_movement(
        session, tenant_id, models.kind, raw_material_id,
        models.movement_types.PRODUCTION_USAGE, quantity, unit,
        reference_id=str(production_id),
        notes=notes or f'Consumo en producción {production_id}'
    )


def register_production_output(
    session, tenant_id: int, product_id: int, quantity, unit: str,
    production_id, notes: Optional[str] = None
):
    """Record a production_output entry for a single finished product."""
    models = get_stock_kind('finished_product')
    return record_movement(
        session, tenant_id, models.kind, product_id,
        models.movement_types.PRODUCTION_OUTPUT, quantity, unit,
        reference_id=str(production_id),
        notes=notes or f'Salida de producción {production_id}'
    )
