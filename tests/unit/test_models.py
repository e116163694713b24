"""
Unit tests for SQLAlchemy models.
"""

import pytest
import uuid
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from pharmapos.models import Operator, Medicine, SaleDraft, SaleDraftLine, InvoiceSequence, INVOICE_SEQUENCE


class TestOperatorModel:
    """Tests for Operator model."""

    def test_create_operator(self, session):
        """Test creating an operator."""
        suffix = str(uuid.uuid4())[:8]
        email = f'cashier_{suffix}@example.com'
        operator = Operator(email=email, full_name='Front Desk', active=True)
        operator.set_password('securepassword')
        session.add(operator)
        session.commit()

        assert operator.id is not None
        assert operator.password_hash is not None
        assert operator.password_hash != 'securepassword'

    def test_password_hashing(self):
        """Test password hashing and verification."""
        operator = Operator(email='user@test.com', active=True)
        operator.set_password('mypassword')

        assert operator.check_password('mypassword') is True
        assert operator.check_password('wrongpassword') is False

    def test_operator_without_password_cannot_log_in(self):
        assert Operator(email='nopass@test.com').check_password('anything') is False

    def test_display_name_falls_back_to_email(self):
        assert Operator(email='a@test.com', full_name='Ana').display_name == 'Ana'
        assert Operator(email='a@test.com').display_name == 'a@test.com'

    def test_operator_email_unique(self, session, operator):
        session.add(Operator(email=operator.email, full_name='Duplicate'))

        with pytest.raises(IntegrityError):
            session.commit()


class TestMedicineModel:
    """Tests for Medicine model."""

    def test_create_medicine(self, session):
        medicine = Medicine(name='Cetirizine', unit_sales_price=Decimal('4.25'), stock_qty=40)
        session.add(medicine)
        session.commit()

        assert medicine.id is not None
        assert medicine.pack_size == 1
        assert medicine.unit_purchase_price == Decimal('0')
        assert medicine.active is True

    def test_to_dict_renders_prices_as_strings(self, paracetamol):
        data = paracetamol.to_dict()

        assert data['name'] == 'Paracetamol'
        assert data['unit_sales_price'] == '10.00'
        assert data['pack_size'] == 10
        assert data['stock_qty'] == 100

    def test_name_unique(self, session, paracetamol):
        session.add(Medicine(name='Paracetamol', unit_sales_price=Decimal('1.00'), stock_qty=1))

        with pytest.raises(IntegrityError):
            session.commit()

    def test_stock_cannot_go_negative(self, session, paracetamol):
        paracetamol.stock_qty = -1

        with pytest.raises(IntegrityError):
            session.commit()


class TestSaleDraftModel:
    """Tests for SaleDraft and SaleDraftLine models."""

    def test_one_draft_per_operator(self, session, operator):
        session.add(SaleDraft(operator_id=operator.id))
        session.commit()
        session.add(SaleDraft(operator_id=operator.id))

        with pytest.raises(IntegrityError):
            session.commit()

    def test_line_quantity_must_be_positive(self, session, operator, paracetamol):
        draft = SaleDraft(operator_id=operator.id)
        draft.lines.append(SaleDraftLine(
            medicine_id=paracetamol.id,
            qty=0,
            unit_sales_price=paracetamol.unit_sales_price,
        ))
        session.add(draft)

        with pytest.raises(IntegrityError):
            session.commit()

    def test_deleting_draft_deletes_lines(self, session, operator, paracetamol):
        draft = SaleDraft(operator_id=operator.id)
        draft.lines.append(SaleDraftLine(
            medicine_id=paracetamol.id,
            qty=2,
            unit_sales_price=paracetamol.unit_sales_price,
        ))
        session.add(draft)
        session.commit()

        assert draft.find_line(paracetamol.id).medicine_name == 'Paracetamol'

        session.delete(draft)
        session.commit()

        assert session.query(SaleDraftLine).count() == 0


class TestInvoiceSequenceModel:

    def test_sequence_row(self, session):
        session.add(InvoiceSequence(name=INVOICE_SEQUENCE, last_value=0))
        session.commit()

        assert session.get(InvoiceSequence, INVOICE_SEQUENCE).last_value == 0
