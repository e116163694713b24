"""Medicine model (catalog record)."""
from sqlalchemy import Column, BigInteger, Integer, String, Boolean, Numeric, DateTime, CheckConstraint
from sqlalchemy.sql import func
from pharmapos.database import Base, BigIntPK


class Medicine(Base):
    """Catalog medicine. stock_qty is written only by the catalog service."""

    __tablename__ = 'medicine'
    __table_args__ = (
        CheckConstraint('stock_qty >= 0', name='ck_medicine_stock_non_negative'),
        CheckConstraint('pack_size >= 1', name='ck_medicine_pack_size_positive'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, unique=True)
    unit_sales_price = Column(Numeric(10, 2), nullable=False)
    unit_purchase_price = Column(Numeric(10, 2), nullable=False, default=0, server_default='0.00')
    pack_size = Column(Integer, nullable=False, default=1, server_default='1')
    stock_qty = Column(BigInteger, nullable=False, default=0, server_default='0')
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'unit_sales_price': str(self.unit_sales_price),
            'unit_purchase_price': str(self.unit_purchase_price),
            'pack_size': self.pack_size,
            'stock_qty': self.stock_qty,
        }

    def __repr__(self):
        return f"<Medicine(id={self.id}, name='{self.name}', stock_qty={self.stock_qty})>"
