"""Dashboard blueprint - draft invoice operations, live preview and finalize."""
from flask import Blueprint, request, g, jsonify, url_for
from pharmapos.database import get_session
from pharmapos.middleware import require_login
from pharmapos.services import sale_draft_service, invoice_service
from pharmapos.blueprints.invoices import serialize_invoice

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


def _payload() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _draft_response(db_session, status_code=200):
    draft = sale_draft_service.get_draft(db_session, g.operator_id)
    body = sale_draft_service.serialize_draft(draft)
    body['totals'] = invoice_service.preview(db_session, g.operator_id).to_dict()
    return jsonify(body), status_code


@dashboard_bp.route('/draft', methods=['GET'])
@require_login
def get_draft():
    """Current draft with undiscounted invoice totals."""
    return _draft_response(get_session())


@dashboard_bp.route('/draft/items', methods=['POST'])
@require_login
def add_item():
    """Add (or replace) a medicine line in the operator's draft."""
    db_session = get_session()
    payload = _payload()

    try:
        sale_draft_service.add_item(
            db_session,
            g.operator_id,
            payload.get('medicine_id'),
            payload.get('qty'),
            payload.get('discount_percent'),
        )
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    return _draft_response(db_session, 201)


@dashboard_bp.route('/draft/items/<int:medicine_id>', methods=['PATCH'])
@require_login
def update_item(medicine_id: int):
    """Replace the quantity of a line; zero or less removes it."""
    db_session = get_session()
    payload = _payload()

    try:
        sale_draft_service.update_item(db_session, g.operator_id, medicine_id, payload.get('qty'))
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    return _draft_response(db_session)


@dashboard_bp.route('/draft/items/<int:medicine_id>', methods=['DELETE'])
@require_login
def remove_item(medicine_id: int):
    db_session = get_session()

    try:
        sale_draft_service.remove_item(db_session, g.operator_id, medicine_id)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    return _draft_response(db_session)


@dashboard_bp.route('/draft', methods=['DELETE'])
@require_login
def discard_draft():
    db_session = get_session()

    try:
        sale_draft_service.discard(db_session, g.operator_id)
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    return _draft_response(db_session)


@dashboard_bp.route('/draft/preview', methods=['GET'])
@require_login
def preview():
    """Pricing breakdown for a prospective invoice discount; mutates nothing."""
    breakdown = invoice_service.preview(get_session(), g.operator_id, request.args.get('discount'))
    return jsonify(breakdown.to_dict())


@dashboard_bp.route('/finalize', methods=['POST'])
@require_login
def finalize():
    """Commit the draft as a numbered invoice and return it for the receipt."""
    payload = _payload()

    invoice = invoice_service.finalize(
        get_session(),
        g.operator,
        payload.get('cash_paid'),
        payload.get('discount_percent'),
        payload.get('customer_name'),
    )

    body = serialize_invoice(invoice)
    body['receipt_url'] = url_for('invoices.receipt_pdf', invoice_number=invoice.invoice_number)
    return jsonify(body), 201
