"""Sale Draft Service - the open invoice of each operator session."""
import logging
from decimal import Decimal
from datetime import datetime
from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from pharmapos.models import SaleDraft, SaleDraftLine
from pharmapos.exceptions import NotFoundError, OutOfStockError, NoActiveDraftError
from pharmapos.services import catalog_service
from pharmapos.utils.formatters import money_str
from pharmapos.utils.number_format import parse_quantity, parse_signed_quantity, parse_percent

logger = logging.getLogger(__name__)


def get_draft(session: Session, operator_id: int) -> Optional[SaleDraft]:
    """Return the operator's draft, or None when there is no open invoice."""
    return session.query(SaleDraft).filter(SaleDraft.operator_id == operator_id).first()


def _get_or_create_draft(session: Session, operator_id: int) -> SaleDraft:
    """One draft per operator, created lazily by the first add."""
    draft = get_draft(session, operator_id)

    if not draft:
        draft = SaleDraft(operator_id=operator_id)
        session.add(draft)
        session.flush()
        logger.info(f"[DRAFT] Opened draft {draft.id} for operator {operator_id}")

    return draft


def _delete_if_empty(session: Session, draft: SaleDraft) -> None:
    if not draft.lines:
        session.delete(draft)
        logger.info(f"[DRAFT] Draft {draft.id} is empty, removed")


def add_item(
    session: Session,
    operator_id: int,
    medicine_id: int,
    qty,
    discount_percent=Decimal('0')
) -> SaleDraftLine:
    """
    Add a medicine to the operator's draft.

    Re-adding a medicine already in the draft replaces its quantity and
    discount (last write wins) instead of summing. Stock is only checked
    for being non-zero; nothing is reserved or decremented here.

    Raises:
        InvalidQuantityError, InvalidDiscountError, NotFoundError, OutOfStockError
    """
    qty = parse_quantity(qty)
    discount_percent = parse_percent(discount_percent, 'Item discount', strict_upper=True)

    medicine = catalog_service.lookup(session, medicine_id)
    if medicine.stock_qty <= 0:
        raise OutOfStockError(medicine.name)

    draft = _get_or_create_draft(session, operator_id)
    line = draft.find_line(medicine.id)

    if line:
        line.qty = qty
        line.discount_percent = discount_percent
        line.unit_sales_price = medicine.unit_sales_price
    else:
        next_position = max((l.position for l in draft.lines), default=-1) + 1
        line = SaleDraftLine(
            medicine_id=medicine.id,
            medicine=medicine,
            position=next_position,
            qty=qty,
            unit_sales_price=medicine.unit_sales_price,
            discount_percent=discount_percent,
        )
        draft.lines.append(line)

    draft.updated_at = datetime.now()
    session.flush()
    return line


def update_item(session: Session, operator_id: int, medicine_id: int, new_qty) -> Optional[SaleDraftLine]:
    """
    Replace a line's quantity. new_qty <= 0 removes the line.

    Stock is intentionally not re-checked; finalize enforces it.
    Returns the updated line, or None when the line was removed.
    """
    new_qty = parse_signed_quantity(new_qty)
    if new_qty <= 0:
        remove_item(session, operator_id, medicine_id)
        return None

    draft = get_draft(session, operator_id)
    if not draft:
        raise NoActiveDraftError()

    line = draft.find_line(medicine_id)
    if not line:
        raise NotFoundError('This medicine is not in the current invoice.')

    line.qty = new_qty
    draft.updated_at = datetime.now()
    session.flush()
    return line


def remove_item(session: Session, operator_id: int, medicine_id: int) -> None:
    """Remove a line from the draft; no-op if absent."""
    draft = get_draft(session, operator_id)
    if not draft:
        return

    line = draft.find_line(medicine_id)
    if line:
        draft.lines.remove(line)
        draft.updated_at = datetime.now()
        _delete_if_empty(session, draft)
        session.flush()


def discard(session: Session, operator_id: int) -> None:
    """Delete the whole draft; no-op if none exists."""
    draft = get_draft(session, operator_id)
    if draft:
        session.delete(draft)
        session.flush()
        logger.info(f"[DRAFT] Operator {operator_id} discarded draft {draft.id}")


def serialize_draft(draft: Optional[SaleDraft]) -> Dict[str, Any]:
    """Content view of a draft (insertion order). An absent draft is empty."""
    if not draft:
        return {'status': 'EMPTY', 'lines': []}

    return {
        'status': 'DRAFT',
        'lines': [
            {
                'medicine_id': line.medicine_id,
                'medicine_name': line.medicine_name,
                'qty': line.qty,
                'unit_sales_price': money_str(line.unit_sales_price),
                'discount_percent': money_str(line.discount_percent),
            }
            for line in draft.lines
        ],
    }
