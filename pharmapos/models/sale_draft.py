"""Sale Draft model - the open invoice of an operator session."""
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pharmapos.database import Base, BigIntPK


class SaleDraft(Base):
    """
    Sale Draft - persistent cart for the POS dashboard.

    One draft per operator (enforced by UNIQUE constraint). A draft with no
    lines is never kept: it is deleted together with its last line.
    """

    __tablename__ = 'sale_draft'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    operator_id = Column(BigInteger, ForeignKey('operator.id'), nullable=False, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    operator = relationship('Operator')
    lines = relationship(
        'SaleDraftLine',
        back_populates='draft',
        cascade='all, delete-orphan',
        order_by='SaleDraftLine.position',
    )

    def find_line(self, medicine_id):
        return next((line for line in self.lines if line.medicine_id == medicine_id), None)

    def __repr__(self):
        return f"<SaleDraft(id={self.id}, operator_id={self.operator_id}, lines={len(self.lines)})>"
