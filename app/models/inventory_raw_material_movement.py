"""Raw material inventory movement model (append-only ledger)."""
import enum
import uuid
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship, synonym
from sqlalchemy.sql import func
from app.database import Base


class RawMaterialMovementType(enum.Enum):
    """Raw material movement type enum."""
    PURCHASE = "purchase"
    ADJUSTMENT = "adjustment"
    PRODUCTION_USAGE = "production_usage"
    INITIAL_LOAD = "initial_load"


class InventoryRawMaterialMovement(Base):
    """Raw material movement (movimiento de materia prima). Quantity is stored signed."""

    __tablename__ = 'inventory_raw_material_movements'
    __table_args__ = (
        Index('ix_raw_material_movements_tenant_created', 'tenant_id', 'created_at'),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False)
    raw_material_id = Column(BigInteger, ForeignKey('raw_materials.id'), nullable=False, index=True)
    type = Column(
        Enum(RawMaterialMovementType, name='raw_material_movement_type',
             values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False
    )
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(20), nullable=False)
    reference_id = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    stock_item_id = synonym('raw_material_id')

    # Relationships
    raw_material = relationship('RawMaterial')

    def __repr__(self):
        return f"<InventoryRawMaterialMovement(id={self.id}, type={self.type.value}, quantity={self.quantity})>"
