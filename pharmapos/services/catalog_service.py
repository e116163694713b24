"""
Catalog service - medicine lookup and the only writer of stock_qty.

decrement_stock is a compare-and-swap UPDATE so two sessions selling the
last units of the same medicine cannot both succeed.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmapos.models import Medicine, SaleDraftLine
from pharmapos.exceptions import NotFoundError, InsufficientStockError, ValidationError, InvalidQuantityError
from pharmapos.utils.number_format import parse_quantity, parse_signed_quantity, parse_money

logger = logging.getLogger(__name__)


def lookup(session: Session, medicine_id: int) -> Medicine:
    """Get an active medicine by id or raise NotFoundError."""
    try:
        medicine_id = int(medicine_id)
    except (TypeError, ValueError):
        raise NotFoundError(f"Medicine {medicine_id} not found.")

    medicine = session.query(Medicine).filter(
        Medicine.id == medicine_id,
        Medicine.active == True  # noqa: E712
    ).first()

    if not medicine:
        raise NotFoundError(f'Medicine {medicine_id} not found.')
    return medicine


def search_medicines(session: Session, query: str = '', limit: int = 50) -> List[Medicine]:
    """Active medicines whose name contains query (case-insensitive), by name."""
    q = session.query(Medicine).filter(Medicine.active == True)  # noqa: E712

    query = (query or '').strip()[:100]
    if query:
        q = q.filter(func.lower(Medicine.name).like(f'%{query.lower()}%'))

    return q.order_by(Medicine.name).limit(limit).all()


def decrement_stock(session: Session, medicine_id: int, qty: int) -> Medicine:
    """
    Remove qty units from stock, all or nothing.

    Does not commit: the caller owns the transaction so that several
    decrements can be rolled back together.

    Raises:
        NotFoundError, InsufficientStockError
    """
    result = session.execute(
        update(Medicine)
        .where(Medicine.id == medicine_id, Medicine.stock_qty >= qty)
        .values(stock_qty=Medicine.stock_qty - qty)
        .execution_options(synchronize_session=False)
    )

    medicine = session.query(Medicine).populate_existing().filter(Medicine.id == medicine_id).first()
    if not medicine:
        raise NotFoundError(f'Medicine {medicine_id} not found.')

    if result.rowcount != 1:
        logger.warning(
            f"[CATALOG] Decrement refused for medicine {medicine_id}: "
            f"required {qty}, available {medicine.stock_qty}"
        )
        raise InsufficientStockError(medicine.name, qty, medicine.stock_qty)

    return medicine


def increment_stock(session: Session, medicine_id: int, packs_purchased) -> Medicine:
    """
    Restock a medicine by packs: stock_qty += pack_size * packs_purchased.

    Raises:
        InvalidQuantityError, NotFoundError
    """
    packs = parse_quantity(packs_purchased)
    medicine = lookup(session, medicine_id)
    units = medicine.pack_size * packs

    try:
        session.execute(
            update(Medicine)
            .where(Medicine.id == medicine.id)
            .values(stock_qty=Medicine.stock_qty + units)
            .execution_options(synchronize_session=False)
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(medicine)
    logger.info(f"[CATALOG] Restocked {medicine.name}: +{units} units ({packs} packs), now {medicine.stock_qty}")
    return medicine


def create_medicine(session: Session, payload: Dict[str, Any]) -> Medicine:
    """
    Validated constructor for catalog records.

    Args:
        payload: name, unit_sales_price, unit_purchase_price (optional),
            pack_size (optional, default 1), stock_qty (optional, default 0)
    """
    name = (payload.get('name') or '').strip()
    if not name:
        raise ValidationError('Medicine name is required.')

    sales_price = parse_money(payload.get('unit_sales_price'), 'unit_sales_price')
    purchase_price = parse_money(payload.get('unit_purchase_price', 0), 'unit_purchase_price')
    pack_size = parse_quantity(payload.get('pack_size', 1))

    stock_qty = payload.get('stock_qty', 0)
    stock_qty = parse_quantity(stock_qty) if stock_qty not in (0, '0', None, '') else 0

    medicine = Medicine(
        name=name,
        unit_sales_price=sales_price.quantize(Decimal('0.01')),
        unit_purchase_price=purchase_price.quantize(Decimal('0.01')),
        pack_size=pack_size,
        stock_qty=stock_qty,
        active=True,
    )
    try:
        session.add(medicine)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ValidationError(f'A medicine named "{name}" already exists.')

    logger.info(f"[CATALOG] Created medicine {medicine.id} ({medicine.name})")
    return medicine


def update_medicine(session: Session, medicine_id: int, payload: Dict[str, Any]) -> Medicine:
    """
    Edit a catalog record. Only the keys present in payload change.

    stock_qty here is a stock-count correction (>= 0). Open drafts keep the
    price snapshot they were built with.

    Raises:
        NotFoundError, ValidationError, InvalidQuantityError
    """
    medicine = lookup(session, medicine_id)
    changes = {}

    if 'name' in payload:
        changes['name'] = (payload.get('name') or '').strip()
        if not changes['name']:
            raise ValidationError('Medicine name is required.')
    if 'unit_sales_price' in payload:
        changes['unit_sales_price'] = parse_money(payload['unit_sales_price'], 'unit_sales_price').quantize(Decimal('0.01'))
    if 'unit_purchase_price' in payload:
        changes['unit_purchase_price'] = parse_money(payload['unit_purchase_price'], 'unit_purchase_price').quantize(Decimal('0.01'))
    if 'pack_size' in payload:
        changes['pack_size'] = parse_quantity(payload['pack_size'])
    if 'stock_qty' in payload:
        stock_qty = parse_signed_quantity(payload['stock_qty'])
        if stock_qty < 0:
            raise InvalidQuantityError('Stock cannot be negative', payload={'value': str(payload['stock_qty'])})
        changes['stock_qty'] = stock_qty

    # All fields validated, apply them together
    for key, value in changes.items():
        setattr(medicine, key, value)

    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ValidationError(f'A medicine named "{payload.get("name")}" already exists.')

    logger.info(f"[CATALOG] Updated medicine {medicine.id} ({medicine.name})")
    return medicine


def deactivate_medicine(session: Session, medicine_id: int) -> Medicine:
    """
    Soft delete: the medicine leaves the catalog while past invoice lines
    keep their snapshot. It is also taken out of every open draft so it can
    no longer be sold; drafts left empty are deleted.
    """
    medicine = lookup(session, medicine_id)
    medicine.active = False

    removed = session.query(SaleDraftLine).filter(SaleDraftLine.medicine_id == medicine.id).all()
    drafts = {line.draft for line in removed}
    for line in removed:
        line.draft.lines.remove(line)
    for draft in drafts:
        if not draft.lines:
            session.delete(draft)

    try:
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"[CATALOG] Deactivated medicine {medicine.id} ({medicine.name}), dropped {len(removed)} draft lines")
    return medicine
