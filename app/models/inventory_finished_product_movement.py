"""Finished product inventory movement model (append-only ledger)."""
import enum
import uuid
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship, synonym
from sqlalchemy.sql import func
from app.database import Base


class FinishedProductMovementType(enum.Enum):
    """Finished product movement type enum."""
    PRODUCTION_OUTPUT = "production_output"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    INITIAL_LOAD = "initial_load"


class InventoryFinishedProductMovement(Base):
    """Finished product movement (movimiento de producto terminado). Quantity is stored signed."""

    __tablename__ = 'inventory_finished_product_movements'
    __table_args__ = (
        Index('ix_finished_product_movements_tenant_created', 'tenant_id', 'created_at'),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False)
    product_id = Column(BigInteger, ForeignKey('products.id'), nullable=False, index=True)
    type = Column(
        Enum(FinishedProductMovementType, name='finished_product_movement_type',
             values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False
    )
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(20), nullable=False)
    reference_id = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    stock_item_id = synonym('product_id')

    # Relationships
    product = relationship('Product')

    def __repr__(self):
        return f"<InventoryFinishedProductMovement(id={self.id}, type={self.type.value}, quantity={self.quantity})>"
