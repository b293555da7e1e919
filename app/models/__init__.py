"""Models package - exports all SQLAlchemy models."""
# Tenancy and stock item directories
from app.models.tenant import Tenant
from app.models.stock_item_kind import StockItemKind
from app.models.raw_material import RawMaterial
from app.models.product import Product

# Balance projection
from app.models.inventory_raw_material import InventoryRawMaterial
from app.models.inventory_finished_product import InventoryFinishedProduct

# Ledger
from app.models.inventory_raw_material_movement import InventoryRawMaterialMovement, RawMaterialMovementType
from app.models.inventory_finished_product_movement import (
    InventoryFinishedProductMovement, FinishedProductMovementType
)

# Productions
from app.models.production import Production, ProductionStatus
from app.models.production_material import ProductionMaterial
from app.models.production_product import ProductionProduct

__all__ = [
    'Tenant', 'StockItemKind', 'RawMaterial', 'Product',
    'InventoryRawMaterial', 'InventoryFinishedProduct',
    'InventoryRawMaterialMovement', 'RawMaterialMovementType',
    'InventoryFinishedProductMovement', 'FinishedProductMovementType',
    'Production', 'ProductionStatus', 'ProductionMaterial', 'ProductionProduct',
]
