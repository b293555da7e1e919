"""Finished product inventory (current balance) model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, synonym
from sqlalchemy.sql import func
from app.database import Base, BigIntPK


class InventoryFinishedProduct(Base):
    """Current quantity on hand of a finished product - 1:1 per (tenant, product)."""

    __tablename__ = 'inventory_finished_products'
    __table_args__ = (
        UniqueConstraint('tenant_id', 'product_id', name='uq_inventory_finished_products_tenant_item'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False)
    product_id = Column(BigInteger, ForeignKey('products.id'), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False, default=0)
    unit = Column(String(20), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    stock_item_id = synonym('product_id')

    # Relationships
    product = relationship('Product', back_populates='inventory')

    def __repr__(self):
        return f"<InventoryFinishedProduct(product_id={self.product_id}, quantity={self.quantity})>"
