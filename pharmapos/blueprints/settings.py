"""Settings blueprint - organization profile shown on receipts."""
from flask import Blueprint, request, jsonify, current_app
from pharmapos.database import get_session
from pharmapos.middleware import require_login
from pharmapos.services import organization_service

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


@settings_bp.route('/organization', methods=['GET'])
@require_login
def get_organization():
    return jsonify(organization_service.get_organization(get_session(), current_app.config))


@settings_bp.route('/organization', methods=['PATCH'])
@require_login
def update_organization():
    """Edit the header printed on every receipt and export."""
    payload = request.get_json(silent=True) or request.form.to_dict()
    organization = organization_service.update_organization(get_session(), payload, current_app.config)
    return jsonify(organization)
