"""
Flask CLI commands for setup and back-office tasks.

Commands:
- flask init-db: Create tables and seed the invoice sequence
- flask create-operator: Create a cashier account
- flask add-medicine: Add a medicine to the catalog
- flask restock: Add packs of a medicine to stock
"""

import re
import click
from pharmapos.database import get_session, create_all
from pharmapos.models import Operator, InvoiceSequence, INVOICE_SEQUENCE
from pharmapos.exceptions import PosError
from pharmapos.services import catalog_service


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables and the invoice number sequence."""
        create_all()
        db_session = get_session()
        if not db_session.get(InvoiceSequence, INVOICE_SEQUENCE):
            db_session.add(InvoiceSequence(name=INVOICE_SEQUENCE, last_value=0))
            db_session.commit()
        click.echo(click.style('Database ready.', fg='green'))

    @app.cli.command('create-operator')
    @click.option('--email', prompt=True, help='Operator email address')
    @click.option('--name', 'full_name', prompt=True, help='Name printed on receipts')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Operator password')
    def create_operator(email, full_name, password):
        """Create a new cashier account."""
        email = email.strip().lower()

        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, email):
            raise click.BadParameter('Invalid email. Use user@example.com', param_hint='--email')

        if len(password) < 6:
            raise click.BadParameter('Password must be at least 6 characters.', param_hint='--password')

        db_session = get_session()
        if db_session.query(Operator).filter_by(email=email).first():
            raise click.ClickException(f'An operator with email {email} already exists.')

        operator = Operator(email=email, full_name=full_name.strip() or None, active=True)
        operator.set_password(password)
        db_session.add(operator)
        db_session.commit()

        click.echo(click.style(f'Operator created (id {operator.id}).', fg='green'))

    @app.cli.command('add-medicine')
    @click.option('--name', required=True)
    @click.option('--price', 'unit_sales_price', required=True, help='Unit sales price')
    @click.option('--cost', 'unit_purchase_price', default='0', help='Unit purchase price')
    @click.option('--pack-size', default=1, type=int)
    @click.option('--stock', 'stock_qty', default=0, type=int)
    def add_medicine(name, unit_sales_price, unit_purchase_price, pack_size, stock_qty):
        """Add a medicine to the catalog."""
        try:
            medicine = catalog_service.create_medicine(get_session(), {
                'name': name,
                'unit_sales_price': unit_sales_price,
                'unit_purchase_price': unit_purchase_price,
                'pack_size': pack_size,
                'stock_qty': stock_qty,
            })
        except PosError as e:
            raise click.ClickException(e.message)

        click.echo(f'Medicine {medicine.id}: {medicine.name} ({medicine.stock_qty} in stock)')

    @app.cli.command('restock')
    @click.argument('medicine_id', type=int)
    @click.argument('packs', type=int)
    def restock(medicine_id, packs):
        """Add PACKS packs of MEDICINE_ID to stock."""
        try:
            medicine = catalog_service.increment_stock(get_session(), medicine_id, packs)
        except PosError as e:
            raise click.ClickException(e.message)

        click.echo(f'{medicine.name}: {medicine.stock_qty} in stock')
