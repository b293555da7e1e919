"""Production Material model."""
from sqlalchemy import Column, BigInteger, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, BigIntPK


class ProductionMaterial(Base):
    """Raw material consumed by a production (detalle de materias primas)."""

    __tablename__ = 'production_materials'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    production_id = Column(BigInteger, ForeignKey('productions.id', ondelete='CASCADE'), nullable=False, index=True)
    raw_material_id = Column(BigInteger, ForeignKey('raw_materials.id'), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(20), nullable=False)

    # Relationships
    production = relationship('Production', back_populates='materials')
    raw_material = relationship('RawMaterial')

    def __repr__(self):
        return f"<ProductionMaterial(id={self.id}, raw_material_id={self.raw_material_id}, quantity={self.quantity})>"
