"""Medicines blueprint - catalog lookup, creation, edits and restock (purchase)."""
from flask import Blueprint, request, jsonify, current_app
from pharmapos.database import get_session
from pharmapos.middleware import require_login
from pharmapos.services import catalog_service

medicines_bp = Blueprint('medicines', __name__, url_prefix='/medicines')


@medicines_bp.route('/', methods=['GET'])
@require_login
def list_medicines():
    medicines = catalog_service.search_medicines(
        get_session(),
        request.args.get('q', ''),
        limit=current_app.config.get('MEDICINE_SEARCH_LIMIT', 50),
    )
    return jsonify([m.to_dict() for m in medicines])


@medicines_bp.route('/', methods=['POST'])
@require_login
def create_medicine():
    payload = request.get_json(silent=True) or request.form.to_dict()
    medicine = catalog_service.create_medicine(get_session(), payload)
    return jsonify(medicine.to_dict()), 201


@medicines_bp.route('/<int:medicine_id>', methods=['GET'])
@require_login
def get_medicine(medicine_id: int):
    return jsonify(catalog_service.lookup(get_session(), medicine_id).to_dict())


@medicines_bp.route('/<int:medicine_id>', methods=['PATCH'])
@require_login
def update_medicine(medicine_id: int):
    payload = request.get_json(silent=True) or request.form.to_dict()
    medicine = catalog_service.update_medicine(get_session(), medicine_id, payload)
    return jsonify(medicine.to_dict())


@medicines_bp.route('/<int:medicine_id>', methods=['DELETE'])
@require_login
def deactivate_medicine(medicine_id: int):
    """Remove from the catalog; invoices already issued are untouched."""
    catalog_service.deactivate_medicine(get_session(), medicine_id)
    return jsonify({'status': 'ok'})


@medicines_bp.route('/<int:medicine_id>/restock', methods=['POST'])
@require_login
def restock(medicine_id: int):
    """Purchase screen: add packs * pack_size units to stock."""
    payload = request.get_json(silent=True) or request.form.to_dict()
    medicine = catalog_service.increment_stock(get_session(), medicine_id, payload.get('packs'))
    return jsonify(medicine.to_dict())
