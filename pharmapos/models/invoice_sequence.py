"""Invoice number sequence (monotonic, gap tolerant)."""
from sqlalchemy import Column, BigInteger, String
from pharmapos.database import Base

INVOICE_SEQUENCE = 'invoice'


class InvoiceSequence(Base):
    """One row per named counter; last_value is the last number handed out."""

    __tablename__ = 'invoice_sequence'

    name = Column(String(50), primary_key=True)
    last_value = Column(BigInteger, nullable=False, default=0)

    def __repr__(self):
        return f"<InvoiceSequence(name='{self.name}', last_value={self.last_value})>"
