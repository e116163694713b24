"""
Invoice service with transactional logic.
Handles finalize (draft -> immutable invoice), preview and invoice history.
"""
import logging
import re
from decimal import Decimal
from datetime import datetime
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context
from sqlalchemy import or_, func, cast, String, text
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from pharmapos.database import is_postgres
from pharmapos.models import Invoice, InvoiceLine, InvoiceSequence, InvoiceStatus, INVOICE_SEQUENCE, Operator
from pharmapos.exceptions import (
    PosError, NotFoundError, EmptyDraftError, NoActiveDraftError,
    InsufficientPaymentError, UnavailableError
)
from pharmapos.services import catalog_service
from pharmapos.services.pricing_service import price, PricingBreakdown
from pharmapos.services.sale_draft_service import get_draft
from pharmapos.utils.formatters import money
from pharmapos.utils.number_format import parse_money, parse_percent
from pharmapos.metrics import invoices_finalized_total, finalize_failures_total

logger = logging.getLogger(__name__)

CUSTOMER_NAME_MAX = 200
INVOICE_CODE_PATTERN = re.compile(r"^inv-?0*(\d+)$", re.IGNORECASE)


def preview(session: Session, operator_id: int, invoice_discount_percent=Decimal('0')) -> PricingBreakdown:
    """Read-only pricing of the operator's draft. No draft prices as empty."""
    discount_percent = parse_percent(invoice_discount_percent, 'Invoice discount', strict_upper=False)
    draft = get_draft(session, operator_id)
    return price(draft.lines if draft else [], discount_percent)


def finalize(
    session: Session,
    operator: Operator,
    cash_paid,
    invoice_discount_percent=Decimal('0'),
    customer_name: Optional[str] = None
) -> Invoice:
    """
    Convert the operator's draft into a finalized invoice.

    Steps:
    1. Validate input (before touching anything)
    2. Load the draft: none -> NoActiveDraft, no lines -> EmptyDraft
    3. Price it and check cash_paid >= net_total
    4. Decrement stock for every line (all or nothing)
    5. Take the next invoice number, snapshot lines, delete the draft
    6. Commit and return the invoice

    Any failure leaves the draft and stock exactly as they were.

    Raises:
        ValidationError, NoActiveDraftError, EmptyDraftError,
        InsufficientPaymentError, InsufficientStockError, UnavailableError
    """
    try:
        return _finalize(session, operator, cash_paid, invoice_discount_percent, customer_name)
    except PosError as e:
        finalize_failures_total.labels(reason=e.code).inc()
        raise


def _finalize(session, operator, cash_paid, invoice_discount_percent, customer_name) -> Invoice:
    cash_paid = money(parse_money(cash_paid, 'Cash paid'))
    discount_percent = parse_percent(invoice_discount_percent, 'Invoice discount', strict_upper=False)
    customer_name = _clean_customer_name(customer_name)

    draft = get_draft(session, operator.id)
    if not draft:
        raise NoActiveDraftError()
    if not draft.lines:
        raise EmptyDraftError()

    breakdown = price(draft.lines, discount_percent)
    if cash_paid < breakdown.net_total:
        raise InsufficientPaymentError(breakdown.net_total, cash_paid)

    try:
        _apply_lock_timeouts(session)

        # Fixed order keeps concurrent finalizes from deadlocking on row locks
        for line in sorted(draft.lines, key=lambda l: l.medicine_id):
            catalog_service.decrement_stock(session, line.medicine_id, line.qty)

        invoice = Invoice(
            invoice_number=next_invoice_number(session),
            created_at=datetime.now(),
            status=InvoiceStatus.FINALIZED,
            customer_name=customer_name,
            cashier_id=operator.id,
            cashier_name=operator.display_name,
            gross_total=breakdown.gross_total,
            invoice_discount_percent=money(breakdown.invoice_discount_percent),
            discount_amount=breakdown.discount_amount,
            net_total=breakdown.net_total,
            cash_paid=cash_paid,
            change_due=cash_paid - breakdown.net_total,
        )
        for position, item in enumerate(breakdown.per_item):
            invoice.lines.append(InvoiceLine(
                medicine_id=item.medicine_id,
                medicine_name=item.medicine_name,
                position=position,
                qty=item.qty,
                unit_sales_price=money(item.unit_sales_price),
                discount_percent=money(item.discount_percent),
                discounted_unit_price=money(item.discounted_unit_price),
                line_gross=money(item.line_gross),
                line_discount=money(item.line_discount),
                line_net=money(item.line_net),
            ))
        session.add(invoice)

        session.delete(draft)
        session.commit()

    except PosError:
        session.rollback()
        raise
    except (OperationalError, PoolTimeoutError) as e:
        session.rollback()
        logger.error(f"[FINALIZE] Database unavailable for operator {operator.id}: {e}")
        raise UnavailableError() from e
    except Exception:
        session.rollback()
        logger.error(f"[FINALIZE] Unexpected failure for operator {operator.id}", exc_info=True)
        raise

    invoices_finalized_total.inc()
    logger.info(
        f"[FINALIZE] Invoice #{invoice.invoice_number} by operator {operator.id}: "
        f"net {invoice.net_total}, paid {invoice.cash_paid}, change {invoice.change_due}"
    )
    return invoice


def next_invoice_number(session: Session) -> int:
    """
    Hand out the next invoice number inside the caller's transaction.

    The sequence row is locked until commit; a rolled back finalize
    gives its number back, so gaps are possible but numbers are never reused.
    """
    sequence = session.query(InvoiceSequence).filter(
        InvoiceSequence.name == INVOICE_SEQUENCE
    ).with_for_update().first()

    if not sequence:
        issued = session.query(func.coalesce(func.max(Invoice.invoice_number), 0)).scalar()
        sequence = InvoiceSequence(name=INVOICE_SEQUENCE, last_value=issued)
        session.add(sequence)

    sequence.last_value += 1
    session.flush()
    return sequence.last_value


def get_invoice(session: Session, invoice_number: int) -> Invoice:
    invoice = session.query(Invoice).filter(Invoice.invoice_number == invoice_number).first()
    if not invoice:
        raise NotFoundError(f'Invoice {invoice_number} not found.')
    return invoice


def list_invoices(session: Session, search: str = '', limit: int = 100) -> List[Invoice]:
    """
    Finalized invoices, newest first.

    A full invoice code ("INV-000012") matches that invoice only. Any other
    search matches the cashier name, the customer name or, when it holds
    digits, invoice numbers containing them ("12" finds 12, 112, 120).
    """
    query = session.query(Invoice)

    search = (search or '').strip()[:100]
    code = INVOICE_CODE_PATTERN.match(search)
    if code:
        query = query.filter(Invoice.invoice_number == int(code.group(1)))
    elif search:
        pattern = f'%{search.lower()}%'
        conditions = [
            func.lower(Invoice.cashier_name).like(pattern),
            func.lower(Invoice.customer_name).like(pattern),
        ]
        digits = re.sub(r'\D', '', search)
        if digits:
            conditions.append(cast(Invoice.invoice_number, String).like(f'%{int(digits)}%'))
        query = query.filter(or_(*conditions))

    return query.order_by(Invoice.invoice_number.desc()).limit(limit).all()


def summarize_invoices(session: Session) -> Dict[str, Any]:
    """Invoice count and revenue (sum of net totals)."""
    count, revenue = session.query(
        func.count(Invoice.id),
        func.coalesce(func.sum(Invoice.net_total), 0)
    ).one()
    return {
        'total_invoices': int(count),
        'total_revenue': money(revenue),
    }


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _clean_customer_name(customer_name) -> Optional[str]:
    if customer_name is None:
        return None
    customer_name = str(customer_name).strip()
    return customer_name[:CUSTOMER_NAME_MAX] or None


def _apply_lock_timeouts(session: Session) -> None:
    """Bound how long finalize may wait on locked stock rows (PostgreSQL only)."""
    if not is_postgres(session):
        return

    lock_ms, statement_ms = 3000, 10000
    if has_app_context():
        lock_ms = current_app.config.get('FINALIZE_LOCK_TIMEOUT_MS', lock_ms)
        statement_ms = current_app.config.get('DB_STATEMENT_TIMEOUT_MS', statement_ms)

    session.execute(text(f"SET LOCAL lock_timeout = {int(lock_ms)}"))
    session.execute(text(f"SET LOCAL statement_timeout = {int(statement_ms)}"))
