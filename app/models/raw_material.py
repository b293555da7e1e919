"""Raw Material model."""
from sqlalchemy import Column, BigInteger, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, BigIntPK


class RawMaterial(Base):
    """Raw material (materia prima) consumed by productions."""

    __tablename__ = 'raw_materials'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)
    unit = Column(String(20), nullable=True)  # Default unit of measure
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    tenant = relationship('Tenant')
    inventory = relationship('InventoryRawMaterial', uselist=False, back_populates='raw_material')

    def __repr__(self):
        return f"<RawMaterial(id={self.id}, name='{self.name}')>"
