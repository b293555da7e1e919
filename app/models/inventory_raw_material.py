"""Raw material inventory (current balance) model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, synonym
from sqlalchemy.sql import func
from app.database import Base, BigIntPK


class InventoryRawMaterial(Base):
    """Current quantity on hand of a raw material - 1:1 per (tenant, raw material)."""

    __tablename__ = 'inventory_raw_materials'
    __table_args__ = (
        UniqueConstraint('tenant_id', 'raw_material_id', name='uq_inventory_raw_materials_tenant_item'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False)
    raw_material_id = Column(BigInteger, ForeignKey('raw_materials.id'), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False, default=0)
    unit = Column(String(20), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    stock_item_id = synonym('raw_material_id')

    # Relationships
    raw_material = relationship('RawMaterial', back_populates='inventory')

    def __repr__(self):
        return f"<InventoryRawMaterial(raw_material_id={self.raw_material_id}, quantity={self.quantity})>"
