"""Auth blueprint - operator login/logout."""
from flask import Blueprint, request, session, g, jsonify, current_app
from pharmapos.database import get_session
from pharmapos.models import Operator
from pharmapos.middleware import require_login
from pharmapos.exceptions import UnauthorizedError, ValidationError

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate with email + password and bind the operator to the session."""
    payload = request.get_json(silent=True) or request.form.to_dict()
    email = (payload.get('email') or '').strip().lower()
    password = payload.get('password') or ''

    if not email or not password:
        raise ValidationError('Email and password are required.')

    operator = get_session().query(Operator).filter_by(email=email, active=True).first()
    if not operator or not operator.check_password(password):
        current_app.logger.warning(f"Failed login for {email}")
        raise UnauthorizedError('Invalid email or password.')

    session.clear()
    session['operator_id'] = operator.id
    session.permanent = True
    current_app.logger.info(f"Operator {operator.id} logged in")

    return jsonify({'status': 'ok', 'operator': operator.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Forget the operator. The open draft is kept for the next login."""
    session.clear()
    return jsonify({'status': 'ok'})


@auth_bp.route('/me')
@require_login
def me():
    return jsonify({'status': 'ok', 'operator': g.operator.to_dict()})
