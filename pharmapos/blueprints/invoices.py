"""Invoices blueprint - finalized invoice history, receipts and exports."""
from flask import Blueprint, request, jsonify, current_app, Response, send_file
from pharmapos.database import get_session
from pharmapos.middleware import require_login
from pharmapos.models import Invoice
from pharmapos.services import invoice_service, export_service, organization_service
from pharmapos.utils.formatters import money_str, format_invoice_number

invoices_bp = Blueprint('invoices', __name__, url_prefix='/invoices')


def serialize_invoice(invoice: Invoice, with_lines: bool = True) -> dict:
    data = {
        'invoice_number': invoice.invoice_number,
        'invoice_code': format_invoice_number(invoice.invoice_number),
        'created_at': invoice.created_at.isoformat() if invoice.created_at else None,
        'status': invoice.status.value,
        'customer_name': invoice.customer_name,
        'cashier_id': invoice.cashier_id,
        'cashier_name': invoice.cashier_name,
        'gross_total': money_str(invoice.gross_total),
        'invoice_discount_percent': money_str(invoice.invoice_discount_percent),
        'discount_amount': money_str(invoice.discount_amount),
        'net_total': money_str(invoice.net_total),
        'cash_paid': money_str(invoice.cash_paid),
        'change_due': money_str(invoice.change_due),
    }
    if with_lines:
        data['lines'] = [
            {
                'medicine_id': line.medicine_id,
                'medicine_name': line.medicine_name,
                'qty': line.qty,
                'unit_sales_price': money_str(line.unit_sales_price),
                'discount_percent': money_str(line.discount_percent),
                'discounted_unit_price': money_str(line.discounted_unit_price),
                'line_gross': money_str(line.line_gross),
                'line_net': money_str(line.line_net),
            }
            for line in invoice.lines
        ]
    return data


@invoices_bp.route('/', methods=['GET'])
@require_login
def list_invoices():
    invoices = invoice_service.list_invoices(
        get_session(),
        request.args.get('q', ''),
        limit=current_app.config.get('INVOICE_LIST_LIMIT', 100),
    )
    return jsonify([serialize_invoice(inv, with_lines=False) for inv in invoices])


@invoices_bp.route('/summary', methods=['GET'])
@require_login
def summary():
    stats = invoice_service.summarize_invoices(get_session())
    return jsonify({
        'total_invoices': stats['total_invoices'],
        'total_revenue': money_str(stats['total_revenue']),
    })


@invoices_bp.route('/<int:invoice_number>', methods=['GET'])
@require_login
def detail(invoice_number: int):
    return jsonify(serialize_invoice(invoice_service.get_invoice(get_session(), invoice_number)))


@invoices_bp.route('/<int:invoice_number>/export.csv', methods=['GET'])
@require_login
def export_csv(invoice_number: int):
    invoice = invoice_service.get_invoice(get_session(), invoice_number)
    content = export_service.export_invoice_csv(
        invoice,
        organization_service.get_organization(get_session(), current_app.config),
        delimiter=current_app.config.get('EXPORT_DELIMITER', ','),
    )
    filename = f"{format_invoice_number(invoice_number)}.csv"
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@invoices_bp.route('/<int:invoice_number>/receipt.pdf', methods=['GET'])
@require_login
def receipt_pdf(invoice_number: int):
    invoice = invoice_service.get_invoice(get_session(), invoice_number)
    pdf = export_service.render_receipt_pdf(
        invoice,
        organization_service.get_organization(get_session(), current_app.config)
    )
    return send_file(
        pdf,
        mimetype='application/pdf',
        as_attachment=False,
        download_name=f"{format_invoice_number(invoice_number)}.pdf"
    )
