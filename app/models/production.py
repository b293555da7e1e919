"""Production model."""
import enum
from sqlalchemy import Column, BigInteger, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, BigIntPK


class ProductionStatus(enum.Enum):
    """Production status enum. Productions are only ever written as completed."""
    COMPLETED = "completed"


class Production(Base):
    """Production (producción) - converts raw materials into finished products."""

    __tablename__ = 'productions'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id = Column(BigInteger, ForeignKey('tenant.id'), nullable=False, index=True)
    production_date = Column(DateTime(timezone=True), nullable=False)
    batch_code = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(
        Enum(ProductionStatus, name='production_status',
             values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False,
        default=ProductionStatus.COMPLETED
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships (line items live and die with their production)
    materials = relationship(
        'ProductionMaterial', back_populates='production',
        cascade='all, delete-orphan', order_by='ProductionMaterial.id'
    )
    products = relationship(
        'ProductionProduct', back_populates='production',
        cascade='all, delete-orphan', order_by='ProductionProduct.id'
    )

    def __repr__(self):
        return f"<Production(id={self.id}, batch_code='{self.batch_code}', status={self.status.value})>"
