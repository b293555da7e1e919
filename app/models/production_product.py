"""Production Product model."""
from sqlalchemy import Column, BigInteger, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, BigIntPK


class ProductionProduct(Base):
    """Finished product emitted by a production (detalle de productos)."""

    __tablename__ = 'production_products'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    production_id = Column(BigInteger, ForeignKey('productions.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(BigInteger, ForeignKey('products.id'), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(20), nullable=False)

    # Relationships
    production = relationship('Production', back_populates='products')
    product = relationship('Product')

    def __repr__(self):
        return f"<ProductionProduct(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
