"""
Production service with transactional logic - Multi-Tenant.

A production consumes raw materials and emits finished products as one
all-or-nothing transaction: exit movements for every material line, entry
movements for every product line, the production header and its line items.
If any material is short, nothing is written.
"""
from datetime import datetime, date, time
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import selectinload

from app.exceptions import InvalidInputError, InsufficientStockError
from app.metrics import productions_total, stock_movements_total
from app.models import (
    Production, ProductionMaterial, ProductionProduct, ProductionStatus,
    StockItemKind, RawMaterialMovementType, FinishedProductMovementType
)
from app.services.concurrency import run_with_retry
from app.services.movement_service import (
    apply_movement, parse_quantity, validate_unit, retry_settings
)

logger = logging.getLogger(__name__)


def _parse_production_date(value) -> datetime:
    """Accept datetime, date or ISO-8601 string (a trailing 'Z' is allowed)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith('Z'):
            raw = raw[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            pass
    raise InvalidInputError(f'Fecha de producción inválida: {value}')


def _normalize_lines(lines: Optional[List[Dict[str, Any]]], id_key: str, label: str) -> List[Dict[str, Any]]:
    """Validate caller-supplied lines, preserving their order."""
    normalized = []
    for position, line in enumerate(lines or [], start=1):
        try:
            item_id = int(line[id_key])
        except (KeyError, TypeError, ValueError):
            raise InvalidInputError(f'{label} #{position}: {id_key} es requerido')

        qty = parse_quantity(line.get('quantity'))
        if qty <= 0:
            raise InvalidInputError(f'{label} #{position}: la cantidad debe ser mayor a 0')

        normalized.append({
            'item_id': item_id,
            'quantity': qty,
            'unit': validate_unit(line.get('unit')),
        })
    return normalized


def _batch_suffix(batch_code: Optional[str]) -> str:
    return f' (Lote: {batch_code})' if batch_code else ''


def create_production(
    session,
    tenant_id: int,
    production_date,
    materials: Optional[List[Dict[str, Any]]],
    products: List[Dict[str, Any]],
    batch_code: Optional[str] = None,
    notes: Optional[str] = None,
) -> Production:
    """
    Create a production with full transactional processing (tenant-scoped).

    Args:
        session: SQLAlchemy session (the transactional context)
        tenant_id: Tenant ID (REQUIRED for multi-tenant enforcement)
        production_date: datetime, date or ISO-8601 string
        materials: [{'raw_material_id', 'quantity', 'unit'}], may be empty
        products: [{'product_id', 'quantity', 'unit'}], at least one

    Process:
        1. Validate input (before touching the database)
        2. Consume every material line (production_usage exits)
        3. Emit every product line (production_output entries)
        4. Create the production header and its line items
        5. Link the movements to the production and commit

    Raises:
        InvalidInputError: empty product list or malformed lines
        InsufficientStockError: a material line exceeds the stock on hand
        NotFoundError / ForbiddenError: unknown or foreign stock item
    """
    # Step 1: Validate before opening the transaction
    if not products:
        raise InvalidInputError('La producción debe generar al menos un producto terminado')

    produced_at = _parse_production_date(production_date)
    material_lines = _normalize_lines(materials, 'raw_material_id', 'Materia prima')
    product_lines = _normalize_lines(products, 'product_id', 'Producto')
    batch_code = (batch_code or '').strip() or None

    def _op():
        try:
            movements = []

            # Step 2: Materials first, so a shortage aborts before any product balance changes
            usage_note = f'Consumo de producción{_batch_suffix(batch_code)}'
            for line in material_lines:
                movements.append(apply_movement(
                    session, tenant_id, StockItemKind.RAW_MATERIAL, line['item_id'],
                    RawMaterialMovementType.PRODUCTION_USAGE, line['quantity'], line['unit'],
                    notes=usage_note
                ))

            # Step 3: Products (balances created on first output)
            output_note = f'Salida de producción{_batch_suffix(batch_code)}'
            for line in product_lines:
                movements.append(apply_movement(
                    session, tenant_id, StockItemKind.FINISHED_PRODUCT, line['item_id'],
                    FinishedProductMovementType.PRODUCTION_OUTPUT, line['quantity'], line['unit'],
                    notes=output_note
                ))

            # Step 4: Header and line items
            production = Production(
                tenant_id=tenant_id,
                production_date=produced_at,
                batch_code=batch_code,
                notes=notes,
                status=ProductionStatus.COMPLETED,
                created_at=datetime.now()
            )
            for line in material_lines:
                production.materials.append(ProductionMaterial(
                    raw_material_id=line['item_id'],
                    quantity=line['quantity'],
                    unit=line['unit']
                ))
            for line in product_lines:
                production.products.append(ProductionProduct(
                    product_id=line['item_id'],
                    quantity=line['quantity'],
                    unit=line['unit']
                ))
            session.add(production)
            session.flush()

            # Step 5: Link ledger rows to the production, then commit everything
            for movement in movements:
                movement.reference_id = str(production.id)

            session.commit()
            return production, movements

        except InsufficientStockError as e:
            session.rollback()
            logger.info(f"[PRODUCTION] Rejected for tenant {tenant_id}: {e.message}")
            raise
        except Exception:
            session.rollback()
            raise

    production, movements = run_with_retry(session, _op, **retry_settings())

    productions_total.inc()
    for movement in movements:
        kind = StockItemKind.RAW_MATERIAL if movement.type is RawMaterialMovementType.PRODUCTION_USAGE \
            else StockItemKind.FINISHED_PRODUCT
        stock_movements_total.labels(stock_item_kind=kind.value, movement_type=movement.type.value).inc()

    logger.info(
        f"[PRODUCTION] #{production.id} created for tenant {tenant_id}: "
        f"{len(material_lines)} material line(s), {len(product_lines)} product line(s)"
    )

    from app.services.cache_service import invalidate_inventory_cache
    invalidate_inventory_cache(tenant_id)
    return production


def list_productions(session, tenant_id: int) -> List[Production]:
    """All productions of a tenant with their lines, newest production date first."""
    return session.query(Production).options(
        selectinload(Production.materials).selectinload(ProductionMaterial.raw_material),
        selectinload(Production.products).selectinload(ProductionProduct.product)
    ).filter(
        Production.tenant_id == tenant_id
    ).order_by(
        Production.production_date.desc(),
        Production.id.desc()
    ).all()


def get_production(session, production_id: int, tenant_id: int) -> Optional[Production]:
    """
    Get one production with its lines (tenant-scoped).

    Returns None when the production does not exist or belongs to another
    tenant; both mean "does not exist for this tenant".
    """
    return session.query(Production).options(
        selectinload(Production.materials).selectinload(ProductionMaterial.raw_material),
        selectinload(Production.products).selectinload(ProductionProduct.product)
    ).filter(
        Production.id == production_id,
        Production.tenant_id == tenant_id
    ).first()
