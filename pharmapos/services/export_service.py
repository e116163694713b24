"""Receipt / ledger export of finalized invoices (delimited text and PDF)."""
import csv
import io
from io import BytesIO
from typing import Any, Dict, List
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER

from pharmapos.models import Invoice
from pharmapos.utils.formatters import money_str, format_invoice_number, datetime_str

LINE_HEADER = ['Medicine', 'Unit Price', 'Discount %', 'Discounted Unit Price', 'Quantity', 'Line Total']


def organization_from_config(config) -> Dict[str, str]:
    """Organization header block from app config."""
    return {
        'name': config.get('ORGANIZATION_NAME', ''),
        'address': config.get('ORGANIZATION_ADDRESS', ''),
        'phone': config.get('ORGANIZATION_PHONE', ''),
        'currency': config.get('CURRENCY_LABEL', ''),
    }


def invoice_rows(invoice: Invoice, organization: Dict[str, str]) -> List[List[str]]:
    """
    Rows of the exported artifact, in order: organization header, invoice
    number, timestamp, cashier, customer (optional), line items, totals.
    """
    rows = [[organization.get('name', '')]]
    if organization.get('address'):
        rows.append([organization['address']])
    if organization.get('phone'):
        rows.append([organization['phone']])

    rows.append(['Invoice', format_invoice_number(invoice.invoice_number)])
    rows.append(['Date', datetime_str(invoice.created_at)])
    rows.append(['Cashier', invoice.cashier_name])
    if invoice.customer_name:
        rows.append(['Customer', invoice.customer_name])

    rows.append(list(LINE_HEADER))
    for line in invoice.lines:
        rows.append([
            line.medicine_name,
            money_str(line.unit_sales_price),
            money_str(line.discount_percent),
            money_str(line.discounted_unit_price),
            str(line.qty),
            money_str(line.line_net),
        ])

    rows.extend([
        ['Gross Total', money_str(invoice.gross_total)],
        ['Discount', money_str(invoice.discount_amount)],
        ['Net Total', money_str(invoice.net_total)],
        ['Cash Paid', money_str(invoice.cash_paid)],
        ['Change', money_str(invoice.change_due)],
    ])
    return rows


def export_invoice_csv(invoice: Invoice, organization: Dict[str, str], delimiter: str = ',') -> str:
    """
    Delimited export of one invoice.

    Fields containing the delimiter, a quote or a line break are wrapped in
    quotes with embedded quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator='\n',
    )
    writer.writerows(invoice_rows(invoice, organization))
    return buffer.getvalue()


def render_receipt_pdf(invoice: Invoice, organization: Dict[str, Any]) -> BytesIO:
    """Printable receipt for a finalized invoice."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75*inch,
        leftMargin=0.75*inch,
        topMargin=0.75*inch,
        bottomMargin=0.75*inch
    )

    elements = []
    styles = getSampleStyleSheet()
    currency = organization.get('currency') or ''

    title_style = ParagraphStyle(
        'ReceiptTitle',
        parent=styles['Heading1'],
        fontSize=20,
        textColor=colors.HexColor('#2C3E50'),
        spaceAfter=8,
        alignment=TA_CENTER,
        fontName='Helvetica-Bold'
    )
    header_style = ParagraphStyle(
        'ReceiptHeader',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#7F8C8D'),
        alignment=TA_CENTER,
        spaceAfter=4
    )

    # 1. Organization header
    elements.append(Paragraph(escape(organization.get('name') or 'Receipt'), title_style))
    for key in ('address', 'phone'):
        if organization.get(key):
            elements.append(Paragraph(escape(organization[key]), header_style))
    elements.append(Spacer(1, 0.25*inch))

    # 2. Invoice metadata
    info_data = [
        ['Invoice:', format_invoice_number(invoice.invoice_number)],
        ['Date:', datetime_str(invoice.created_at)],
        ['Cashier:', invoice.cashier_name],
    ]
    if invoice.customer_name:
        info_data.append(['Customer:', invoice.customer_name])

    info_table = Table(info_data, colWidths=[1.5*inch, 4*inch])
    info_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
        ('ALIGN', (1, 0), (1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#34495E')),
    ]))
    elements.append(info_table)
    elements.append(Spacer(1, 0.25*inch))

    # 3. Line items
    table_data = [list(LINE_HEADER)]
    for line in invoice.lines:
        table_data.append([
            Paragraph(escape(line.medicine_name), styles['Normal']),
            money_str(line.unit_sales_price),
            money_str(line.discount_percent),
            money_str(line.discounted_unit_price),
            str(line.qty),
            money_str(line.line_net),
        ])

    items_table = Table(table_data, colWidths=[2.3*inch, 0.8*inch, 0.8*inch, 1.1*inch, 0.7*inch, 0.9*inch])
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#3498DB')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, 0), 8),
        ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#BDC3C7')),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#ECF0F1')]),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 0.2*inch))

    # 4. Totals
    totals_data = [
        ['Gross Total:', f"{currency} {money_str(invoice.gross_total)}".strip()],
        [f"Discount ({money_str(invoice.invoice_discount_percent)}%):", f"-{money_str(invoice.discount_amount)}"],
        ['Net Total:', f"{currency} {money_str(invoice.net_total)}".strip()],
        ['Cash Paid:', money_str(invoice.cash_paid)],
        ['Change:', money_str(invoice.change_due)],
    ]
    totals_table = Table(totals_data, colWidths=[5.2*inch, 1.4*inch])
    totals_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTNAME', (0, 2), (-1, 2), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 11),
        ('TEXTCOLOR', (0, 2), (-1, 2), colors.HexColor('#27AE60')),
        ('LINEABOVE', (0, 2), (-1, 2), 1, colors.HexColor('#27AE60')),
    ]))
    elements.append(totals_table)

    doc.build(elements)
    buffer.seek(0)
    return buffer
