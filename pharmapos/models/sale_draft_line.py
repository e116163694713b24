"""Sale Draft Line model - a line item of an open invoice."""
from decimal import Decimal
from sqlalchemy import Column, BigInteger, Integer, Numeric, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from pharmapos.database import Base, BigIntPK


class SaleDraftLine(Base):
    """
    Line item: one medicine per draft, quantity and optional discount.

    unit_sales_price is the price snapshot taken when the medicine was added.
    """

    __tablename__ = 'sale_draft_line'
    __table_args__ = (
        UniqueConstraint('draft_id', 'medicine_id', name='uq_sale_draft_line_medicine'),
        CheckConstraint('qty >= 1', name='ck_sale_draft_line_qty_positive'),
        CheckConstraint('discount_percent >= 0 AND discount_percent <= 100', name='ck_sale_draft_line_discount_range'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    draft_id = Column(BigInteger, ForeignKey('sale_draft.id', ondelete='CASCADE'), nullable=False, index=True)
    medicine_id = Column(BigInteger, ForeignKey('medicine.id'), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    qty = Column(Integer, nullable=False)
    unit_sales_price = Column(Numeric(10, 2), nullable=False)
    discount_percent = Column(Numeric(5, 2), nullable=False, default=Decimal('0'))

    # Relationships
    draft = relationship('SaleDraft', back_populates='lines')
    medicine = relationship('Medicine')

    @property
    def medicine_name(self):
        return self.medicine.name if self.medicine else None

    def __repr__(self):
        return f"<SaleDraftLine(id={self.id}, medicine_id={self.medicine_id}, qty={self.qty})>"
