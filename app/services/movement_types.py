"""
Movement type vocabulary and polarity table - Multi-Tenant inventory.

Every stock item kind (raw material, finished product) has its own balance
table, ledger table and movement vocabulary. The polarity of a movement type
(does it increase or decrease stock?) is a static table; nothing is decided
by string comparison at runtime.
"""
import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Type

from app.exceptions import InvalidMovementTypeError
from app.models import (
    StockItemKind, RawMaterial, Product,
    InventoryRawMaterial, InventoryFinishedProduct,
    InventoryRawMaterialMovement, InventoryFinishedProductMovement,
    RawMaterialMovementType, FinishedProductMovementType,
)


class MovementPolarity(enum.Enum):
    """Direction of a movement type."""
    ENTRY = "entry"
    EXIT = "exit"


@dataclass(frozen=True)
class StockKindModels:
    """Tables and vocabulary backing one stock item kind."""
    kind: StockItemKind
    item_model: Type[Any]
    balance_model: Type[Any]
    movement_model: Type[Any]
    movement_types: Type[enum.Enum]
    label: str


STOCK_KINDS: Dict[StockItemKind, StockKindModels] = {
    StockItemKind.RAW_MATERIAL: StockKindModels(
        kind=StockItemKind.RAW_MATERIAL,
        item_model=RawMaterial,
        balance_model=InventoryRawMaterial,
        movement_model=InventoryRawMaterialMovement,
        movement_types=RawMaterialMovementType,
        label='Materia prima',
    ),
    StockItemKind.FINISHED_PRODUCT: StockKindModels(
        kind=StockItemKind.FINISHED_PRODUCT,
        item_model=Product,
        balance_model=InventoryFinishedProduct,
        movement_model=InventoryFinishedProductMovement,
        movement_types=FinishedProductMovementType,
        label='Producto terminado',
    ),
}

# Adjustments are classified as entries, but their signed quantity passes
# through unchanged (see compute_delta).
MOVEMENT_POLARITY: Dict[enum.Enum, MovementPolarity] = {
    RawMaterialMovementType.PURCHASE: MovementPolarity.ENTRY,
    RawMaterialMovementType.INITIAL_LOAD: MovementPolarity.ENTRY,
    RawMaterialMovementType.ADJUSTMENT: MovementPolarity.ENTRY,
    RawMaterialMovementType.PRODUCTION_USAGE: MovementPolarity.EXIT,
    FinishedProductMovementType.PRODUCTION_OUTPUT: MovementPolarity.ENTRY,
    FinishedProductMovementType.INITIAL_LOAD: MovementPolarity.ENTRY,
    FinishedProductMovementType.ADJUSTMENT: MovementPolarity.ENTRY,
    FinishedProductMovementType.SALE: MovementPolarity.EXIT,
}


def get_stock_kind(kind) -> StockKindModels:
    """Resolve a StockItemKind (or its value) to its backing models."""
    if not isinstance(kind, StockItemKind):
        try:
            kind = StockItemKind(kind)
        except ValueError:
            raise ValueError(f'Unknown stock item kind: {kind}')
    return STOCK_KINDS[kind]


def parse_movement_type(kind: StockItemKind, movement_type):
    """
    Convert a movement type (enum member or its string value) to the enum of
    the given stock item kind.

    Raises:
        InvalidMovementTypeError: if the type is not in the kind's vocabulary
    """
    types = STOCK_KINDS[kind].movement_types
    if isinstance(movement_type, types):
        return movement_type
    if isinstance(movement_type, enum.Enum):
        # A member of the other kind's vocabulary (e.g. SALE for a raw material)
        raise InvalidMovementTypeError(movement_type.value, kind)
    try:
        return types(movement_type)
    except ValueError:
        raise InvalidMovementTypeError(movement_type, kind)


def resolve_polarity(kind: StockItemKind, movement_type) -> MovementPolarity:
    """Look up whether a movement type is an entry or an exit for this kind."""
    member = parse_movement_type(kind, movement_type)
    return MOVEMENT_POLARITY[member]


def is_adjustment(movement_type) -> bool:
    return movement_type in (RawMaterialMovementType.ADJUSTMENT, FinishedProductMovementType.ADJUSTMENT)


def compute_delta(kind: StockItemKind, movement_type, quantity: Decimal) -> Decimal:
    """
    Signed change in stock for a requested quantity.

    Adjustments keep the caller's sign; every other type applies its polarity
    to a positive magnitude.
    """
    member = parse_movement_type(kind, movement_type)
    if is_adjustment(member):
        return quantity
    if MOVEMENT_POLARITY[member] is MovementPolarity.ENTRY:
        return quantity
    return -quantity
