import pytest
import uuid
from decimal import Decimal

from pharmapos import create_app
from pharmapos import database
from pharmapos.database import get_session
from pharmapos.models import Operator, Medicine


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing (in-memory SQLite)."""
    app = create_app('config.TestConfig')
    return app


@pytest.fixture(autouse=True)
def app_context(app):
    """Fresh schema and an active app context for every test."""
    with app.app_context():
        database.create_all()
        yield
        get_session().remove()
        database.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session():
    """Database session shared with the services under test."""
    session = get_session()
    yield session
    session.rollback()


def make_operator(session, full_name='Cashier One', password='password123'):
    suffix = str(uuid.uuid4())[:8]
    operator = Operator(
        email=f'cashier-{suffix}@test.com',
        full_name=full_name,
        active=True
    )
    operator.set_password(password)
    session.add(operator)
    session.commit()
    return operator


def make_medicine(session, name, price, stock_qty, pack_size=1, purchase_price='0'):
    medicine = Medicine(
        name=name,
        unit_sales_price=Decimal(str(price)),
        unit_purchase_price=Decimal(str(purchase_price)),
        pack_size=pack_size,
        stock_qty=stock_qty,
        active=True
    )
    session.add(medicine)
    session.commit()
    return medicine


@pytest.fixture(scope='function')
def operator(session):
    """Logged-in cashier owning the draft under test."""
    return make_operator(session)


@pytest.fixture(scope='function')
def other_operator(session):
    """Second cashier with an independent draft."""
    return make_operator(session, full_name='Cashier Two')


@pytest.fixture(scope='function')
def paracetamol(session):
    return make_medicine(session, 'Paracetamol', '10.00', 100, pack_size=10, purchase_price='6.50')


@pytest.fixture(scope='function')
def amoxicillin(session):
    return make_medicine(session, 'Amoxicillin', '20.00', 30, pack_size=12, purchase_price='14.00')


@pytest.fixture(scope='function')
def out_of_stock_medicine(session):
    return make_medicine(session, 'Ibuprofen', '8.00', 0)


@pytest.fixture(scope='function')
def authenticated_client(client, operator):
    """Test client with the operator bound to the Flask session."""
    with client.session_transaction() as sess:
        sess['operator_id'] = operator.id
    return client


@pytest.fixture(scope='function')
def medicine_factory(session):
    """Create catalog medicines inline: medicine_factory('Name', '9.99', stock)."""
    def factory(name, price, stock_qty, pack_size=1):
        return make_medicine(session, name, price, stock_qty, pack_size=pack_size)
    return factory
