"""
Tenant and stock item lookups (tenant directory / item directories).

CRUD for tenants, raw materials and products lives outside the inventory
core; these helpers only resolve and authorize the rows a movement touches.
"""
from app.exceptions import NotFoundError, ForbiddenError
from app.models import Tenant
from app.services.movement_types import get_stock_kind


def get_tenant(session, tenant_id: int) -> Tenant:
    """Return the tenant or raise NotFoundError."""
    tenant = session.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise NotFoundError(f'Cliente con ID {tenant_id} no encontrado', payload={'tenant_id': tenant_id})
    return tenant


def get_stock_item(session, kind, stock_item_id: int, tenant_id: int):
    """
    Return a raw material or finished product owned by the tenant.

    Raises:
        NotFoundError: if no item with that id exists
        ForbiddenError: if the item belongs to another tenant
    """
    models = get_stock_kind(kind)
    item = session.query(models.item_model).filter(models.item_model.id == stock_item_id).first()
    if not item:
        raise NotFoundError(
            f'{models.label} con ID {stock_item_id} no existe',
            payload={'stock_item_id': stock_item_id}
        )
    if item.tenant_id != tenant_id:
        raise ForbiddenError(
            f'{models.label} con ID {stock_item_id} no pertenece a su negocio',
            payload={'stock_item_id': stock_item_id}
        )
    return item
