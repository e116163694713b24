"""Invoice Line model - snapshot of a draft line at finalize time."""
from sqlalchemy import Column, BigInteger, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from pharmapos.database import Base, BigIntPK


class InvoiceLine(Base):
    """Invoice Line (resolved price, discount and totals are frozen)."""

    __tablename__ = 'invoice_line'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    invoice_id = Column(BigInteger, ForeignKey('invoice.id', ondelete='CASCADE'), nullable=False, index=True)
    medicine_id = Column(BigInteger, ForeignKey('medicine.id'), nullable=False)
    medicine_name = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    qty = Column(Integer, nullable=False)
    unit_sales_price = Column(Numeric(10, 2), nullable=False)
    discount_percent = Column(Numeric(5, 2), nullable=False, default=0)
    discounted_unit_price = Column(Numeric(12, 2), nullable=False)
    line_gross = Column(Numeric(12, 2), nullable=False)
    line_discount = Column(Numeric(12, 2), nullable=False)
    line_net = Column(Numeric(12, 2), nullable=False)

    # Relationships
    invoice = relationship('Invoice', back_populates='lines')

    def __repr__(self):
        return f"<InvoiceLine(id={self.id}, medicine_id={self.medicine_id}, qty={self.qty})>"
