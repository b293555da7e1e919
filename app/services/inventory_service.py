"""
Inventory balance service - current stock projection (Multi-Tenant).

One balance row exists per (tenant, stock item). It is created lazily by the
first movement and afterwards only changed through movements, so its quantity
always equals the sum of the item's signed movements.
"""
from decimal import Decimal
from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError

from app.exceptions import ConflictError, ForbiddenError, NotFoundError, InvalidQuantityError
from app.services.concurrency import lock_for_update
from app.services.directory_service import get_tenant, get_stock_item
from app.services.movement_types import get_stock_kind
from app.utils.serializers import balance_to_dict

logger = logging.getLogger(__name__)


def find_balance(session, kind, tenant_id: int, stock_item_id: int, lock: bool = False):
    """
    Return the balance for (tenant, stock item), or None if it was never created.

    With lock=True the row is read FOR UPDATE so concurrent movements on the
    same item serialize until the surrounding transaction ends.
    """
    model = get_stock_kind(kind).balance_model
    query = session.query(model).filter(
        model.tenant_id == tenant_id,
        model.stock_item_id == stock_item_id
    )
    if lock:
        query = lock_for_update(query)
    return query.first()


def upsert_balance(session, kind, tenant_id: int, stock_item_id: int, quantity: Decimal, unit: str):
    """
    Create or replace the balance with an absolute quantity (not an increment).

    Does not commit: runs inside the caller's transaction. A concurrent
    first-time creation of the same balance surfaces as ConflictError.
    """
    model = get_stock_kind(kind).balance_model
    balance = find_balance(session, kind, tenant_id, stock_item_id)

    if balance:
        balance.quantity = quantity
        balance.unit = unit
        balance.updated_at = datetime.now()
    else:
        balance = model(
            tenant_id=tenant_id,
            stock_item_id=stock_item_id,
            quantity=quantity,
            unit=unit,
            updated_at=datetime.now()
        )
        session.add(balance)

    try:
        session.flush()
    except IntegrityError as e:
        logger.warning(f"[INVENTORY] Balance upsert conflict tenant={tenant_id} item={stock_item_id}: {e.orig}")
        raise ConflictError(
            'El inventario fue modificado por otra operación. Intente nuevamente.',
            payload={'stock_item_id': stock_item_id}
        )
    return balance


def list_balances(session, kind, tenant_id: int, stock_item_id: Optional[int] = None) -> List:
    """List a tenant's balances, most recently updated first."""
    model = get_stock_kind(kind).balance_model
    query = session.query(model).filter(model.tenant_id == tenant_id)

    if stock_item_id is not None:
        query = query.filter(model.stock_item_id == stock_item_id)

    return query.order_by(model.updated_at.desc(), model.id.desc()).all()


def get_stock_summary(session, kind, tenant_id: int) -> List[dict]:
    """
    Serialized balances for a tenant, served from Redis when available.

    The cache module 'inventory' is invalidated after every committed movement.
    """
    from flask import current_app
    from app.services.cache_service import get_cache

    models = get_stock_kind(kind)

    def _load():
        return [balance_to_dict(b) for b in list_balances(session, kind, tenant_id)]

    return get_cache().memoize(
        tenant_id, 'inventory', f"balances:{models.kind.value}", _load,
        ttl=current_app.config.get('CACHE_BALANCE_TTL', 60)
    )


def get_balance(session, kind, balance_id: int, tenant_id: int):
    """
    Return a balance row by id.

    Raises:
        NotFoundError: if it does not exist
        ForbiddenError: if it belongs to another tenant
    """
    model = get_stock_kind(kind).balance_model
    balance = session.query(model).filter(model.id == balance_id).first()

    if not balance:
        raise NotFoundError(f'Registro de inventario con ID {balance_id} no encontrado')

    if balance.tenant_id != tenant_id:
        raise ForbiddenError('Acceso denegado a este registro de inventario')

    return balance


def create_balance(session, kind, tenant_id: int, stock_item_id: int, quantity, unit: str):
    """
    Explicitly create the balance of a stock item (rarely used).

    Balances are normally created by the first movement. A positive starting
    quantity is recorded as an initial_load movement in the same transaction,
    so the ledger still accounts for every unit on hand.

    Raises:
        ConflictError: if a balance already exists for this stock item
    """
    from app.services.movement_service import apply_movement, parse_quantity, validate_unit

    models = get_stock_kind(kind)
    quantity = parse_quantity(quantity, allow_zero=True)
    unit = validate_unit(unit)
    if quantity < 0:
        raise InvalidQuantityError('La cantidad inicial no puede ser negativa')

    try:
        get_tenant(session, tenant_id)
        get_stock_item(session, kind, stock_item_id, tenant_id)

        if find_balance(session, kind, tenant_id, stock_item_id, lock=True):
            raise ConflictError(
                'Ya existe un registro de inventario para este ítem. Use movimientos para modificar cantidades.',
                payload={'stock_item_id': stock_item_id}
            )

        if quantity > 0:
            apply_movement(
                session, tenant_id, kind, stock_item_id,
                models.movement_types.INITIAL_LOAD, quantity, unit,
                notes='Carga inicial de inventario'
            )
            balance = find_balance(session, kind, tenant_id, stock_item_id)
        else:
            balance = upsert_balance(session, kind, tenant_id, stock_item_id, Decimal('0'), unit)

        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"[INVENTORY] Balance created tenant={tenant_id} {models.kind.value}={stock_item_id} qty={quantity}")
    from app.services.cache_service import invalidate_inventory_cache
    invalidate_inventory_cache(tenant_id)
    return balance
