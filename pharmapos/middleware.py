"""Middleware for operator authentication."""
from functools import wraps
from flask import session, g
from pharmapos.database import get_session
from pharmapos.models import Operator
from pharmapos.exceptions import UnauthorizedError


def load_operator():
    """
    Load the current operator into g (Flask's per-request global).

    Sets g.operator and g.operator_id when the session belongs to an
    active operator. The operator id keys the operator's draft invoice.
    """
    g.operator = None
    g.operator_id = None

    operator_id = session.get('operator_id')
    if not operator_id:
        return

    operator = get_session().query(Operator).filter_by(id=operator_id, active=True).first()

    if operator:
        g.operator = operator
        g.operator_id = operator.id
    else:
        session.pop('operator_id', None)


def require_login(f):
    """Decorator: reject the request with 401 unless an operator is logged in."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('operator') is None:
            raise UnauthorizedError()
        return f(*args, **kwargs)
    return decorated_function
