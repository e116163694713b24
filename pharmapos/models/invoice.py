"""Invoice model - finalized, immutable sale record."""
import enum
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pharmapos.database import Base, BigIntPK


class InvoiceStatus(enum.Enum):
    """Invoice status enum. Finalized is the only persisted state."""
    FINALIZED = "FINALIZED"


class Invoice(Base):
    """
    Finalized invoice.

    Rows are inserted once by the finalize workflow and never updated;
    the line items are a snapshot of the draft at finalize time.
    """

    __tablename__ = 'invoice'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    invoice_number = Column(BigInteger, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    status = Column(Enum(InvoiceStatus, name='invoice_status'), nullable=False, default=InvoiceStatus.FINALIZED)

    customer_name = Column(String(200), nullable=True)
    cashier_id = Column(BigInteger, ForeignKey('operator.id'), nullable=False)
    cashier_name = Column(String(200), nullable=False)

    gross_total = Column(Numeric(12, 2), nullable=False)
    invoice_discount_percent = Column(Numeric(7, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    net_total = Column(Numeric(12, 2), nullable=False)
    cash_paid = Column(Numeric(12, 2), nullable=False)
    change_due = Column(Numeric(12, 2), nullable=False)

    # Relationships
    cashier = relationship('Operator')
    lines = relationship(
        'InvoiceLine',
        back_populates='invoice',
        cascade='all, delete-orphan',
        order_by='InvoiceLine.position',
    )

    def __repr__(self):
        return f"<Invoice(number={self.invoice_number}, net_total={self.net_total})>"
