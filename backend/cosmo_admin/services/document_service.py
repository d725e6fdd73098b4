# Overview: Renders invoices and bills of lading for an order as PDF bytes.

from __future__ import annotations

from io import BytesIO
from xml.sax.saxutils import escape

from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..models import Customer, Order

DEFAULT_FONT = "Helvetica"
CUSTOM_FONT = "CosmoAdminDoc"

HEADER_FILL = colors.HexColor("#4A4A4A")
MARGIN = 14 * mm

_registered_fonts: dict[str, str] = {}


def _font_name() -> str:
    """Configured TTF (for Cyrillic names) when PDF_FONT_PATH is set."""
    path = current_app.config.get("PDF_FONT_PATH")
    if not path:
        return DEFAULT_FONT
    if path not in _registered_fonts:
        pdfmetrics.registerFont(TTFont(CUSTOM_FONT, path))
        _registered_fonts[path] = CUSTOM_FONT
    return _registered_fonts[path]


def _money(value: float) -> str:
    return f"UAH {value:,.2f}"


def _styles(font: str) -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("DocTitle", parent=base["Title"], fontName=font, alignment=2, fontSize=20),
        "company": ParagraphStyle("Company", parent=base["Heading2"], fontName=font),
        "label": ParagraphStyle("Label", parent=base["Normal"], fontName=font, fontSize=9, textColor=colors.grey),
        "body": ParagraphStyle("Body", parent=base["Normal"], fontName=font, fontSize=10),
        "right": ParagraphStyle("Right", parent=base["Normal"], fontName=font, fontSize=10, alignment=2),
    }


def _lines(*values) -> str:
    return "<br/>".join(escape(v) for v in values if v)


def _header(title: str, styles: dict) -> list:
    cfg = current_app.config
    company = Paragraph(
        f"<b>{escape(cfg['COMPANY_NAME'])}</b><br/>{_lines(cfg.get('COMPANY_ADDRESS'), cfg.get('COMPANY_EMAIL'))}",
        styles["body"],
    )
    heading = Table(
        [[company, Paragraph(escape(title), styles["title"])]],
        colWidths=["60%", "40%"],
    )
    heading.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return [heading, Spacer(1, 8 * mm)]


def _items_table(rows: list[list], col_widths: list, font: str) -> Table:
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    return table


def _footer(font: str):
    def draw(canvas, doc):
        canvas.saveState()
        canvas.setFont(font, 8)
        canvas.setFillColor(colors.grey)
        canvas.drawCentredString(A4[0] / 2, 10 * mm, f"Page {doc.page}")
        canvas.restoreState()
    return draw


def _build(title: str, story: list, font: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title,
    )
    footer = _footer(font)
    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return buffer.getvalue()


def _address_lines(customer: Customer | None) -> list[str]:
    if customer is None:
        return []
    city_line = " ".join(
        part for part in (customer.address_city and f"{customer.address_city},", customer.address_state, customer.address_zip) if part
    )
    return [customer.address_street, city_line, customer.address_country]


def invoice_subtotal(order: Order) -> float:
    """Undiscounted sum of item lines."""
    return sum((i.price or 0) * (i.quantity or 0) for i in order.items)


def render_invoice(order: Order) -> bytes:
    font = _font_name()
    styles = _styles(font)
    customer = order.customer
    story = _header("INVOICE", styles)

    bill_to = Paragraph(
        "<b>BILL TO:</b><br/>" + _lines(order.customer_name, *_address_lines(customer), customer.email if customer else None),
        styles["body"],
    )
    meta = Paragraph(
        f"Invoice number: #{escape(order.id[:8])}<br/>Invoice date: {order.date.strftime('%d.%m.%Y')}",
        styles["right"],
    )
    parties = Table([[bill_to, meta]], colWidths=["60%", "40%"])
    parties.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    story += [parties, Spacer(1, 8 * mm)]

    rows = [["Product", "Qty", "Price", "Discount", "Total"]]
    for item in order.items:
        line_total = (item.price or 0) * item.quantity * (1 - (item.discount or 0) / 100)
        rows.append([
            Paragraph(escape(item.product_name), styles["body"]),
            str(item.quantity),
            _money(item.price or 0),
            f"{item.discount or 0:g}%",
            _money(line_total),
        ])
    story.append(_items_table(rows, ["44%", "10%", "16%", "12%", "18%"], font))

    subtotal = invoice_subtotal(order)
    totals = Table(
        [
            ["Subtotal:", _money(subtotal)],
            ["Discount:", "-" + _money(subtotal - order.total_amount)],
            ["Total due:", _money(order.total_amount)],
        ],
        colWidths=["80%", "20%"],
    )
    totals.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
        ("LINEABOVE", (0, 2), (-1, 2), 0.5, colors.black),
        ("FONTSIZE", (0, 2), (-1, 2), 12),
    ]))
    story += [Spacer(1, 6 * mm), totals]

    if order.notes:
        story += [Spacer(1, 8 * mm), Paragraph("<b>Notes:</b><br/>" + escape(order.notes), styles["body"])]

    return _build(f"Invoice {order.id[:8]}", story, font)


def render_bill_of_lading(order: Order) -> bytes:
    font = _font_name()
    styles = _styles(font)
    cfg = current_app.config
    customer = order.customer
    story = _header("BILL OF LADING", styles)

    shipper = Paragraph(
        "<b>SHIPPER:</b><br/>" + _lines(cfg["COMPANY_NAME"], cfg.get("COMPANY_ADDRESS")),
        styles["body"],
    )
    consignee = Paragraph(
        "<b>CONSIGNEE:</b><br/>" + _lines(order.customer_name, *_address_lines(customer)),
        styles["right"],
    )
    parties = Table([[shipper, consignee]], colWidths=["50%", "50%"])
    parties.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    story += [
        parties,
        Spacer(1, 4 * mm),
        Paragraph(f"Order #{escape(order.id[:8])} of {order.date.strftime('%d.%m.%Y')}", styles["label"]),
        Spacer(1, 4 * mm),
    ]

    rows = [["#", "Description of goods", "Pieces"]]
    for n, item in enumerate(order.items, start=1):
        rows.append([str(n), Paragraph(escape(item.product_name), styles["body"]), str(item.quantity)])
    story.append(_items_table(rows, ["8%", "72%", "20%"], font))

    total_pieces = sum(i.quantity for i in order.items)
    story += [
        Spacer(1, 6 * mm),
        Paragraph(f"<b>Total pieces:</b> {total_pieces}", styles["body"]),
        Spacer(1, 14 * mm),
    ]
    signatures = Table(
        [["Shipper signature: _______________", "Consignee signature: _______________"]],
        colWidths=["50%", "50%"],
    )
    signatures.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
    ]))
    story.append(signatures)

    return _build(f"Bill of lading {order.id[:8]}", story, font)
