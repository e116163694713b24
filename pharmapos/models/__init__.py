"""Models package - exports all SQLAlchemy models."""
from pharmapos.models.operator import Operator
from pharmapos.models.medicine import Medicine
from pharmapos.models.sale_draft import SaleDraft
from pharmapos.models.sale_draft_line import SaleDraftLine
from pharmapos.models.invoice import Invoice, InvoiceStatus
from pharmapos.models.invoice_line import InvoiceLine
from pharmapos.models.invoice_sequence import InvoiceSequence, INVOICE_SEQUENCE
from pharmapos.models.organization import Organization, ORGANIZATION_ID

__all__ = [
    'Operator', 'Medicine',
    'SaleDraft', 'SaleDraftLine',
    'Invoice', 'InvoiceStatus', 'InvoiceLine',
    'InvoiceSequence', 'INVOICE_SEQUENCE',
    'Organization', 'ORGANIZATION_ID',
]
