"""
Single-page A4 GST invoice drawn with the reportlab canvas.

Coordinates are in points from the bottom-left corner. Line items stop
before they reach the summary area, so very long orders are cut short
rather than spilling onto a second page.
"""
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

from reportlab.lib.colors import Color, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
import structlog

from shared.config.settings import GST_RATE

logger = structlog.get_logger(__name__)

PRODUCT_HSN = "6912"
SERVICE_HSN = "9983"

LOGO_NAMES = ("logo.png", "logo.jpg", "logo.jpeg")

PRIMARY = Color(0.545, 0.451, 0.333)
TEXT = Color(0.2, 0.2, 0.2)
MUTED = Color(0.6, 0.6, 0.6)
PANEL = Color(0.98, 0.97, 0.96)
RULE = Color(0.9, 0.9, 0.9)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

MARGIN = 50
TABLE_TOP = 280 # distance from the top edge
ROW_HEIGHT = 20
SUMMARY_FLOOR = 200 # rows stop once they drop below this y

GST_COLUMNS = (("#", 30), ("Description", 200), ("HSN", 50), ("Qty", 40), ("Rate", 80), ("Amount", 80))
PLAIN_COLUMNS = (("#", 30), ("Description", 250), ("Qty", 40), ("Rate", 80), ("Amount", 80))


def format_inr(amount: Optional[float]) -> str:
    """Rs. 1,23,456.00 - the last three digits, then groups of two."""
    amount = amount or 0.0
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"Rs. {sign}{whole}.{fraction}"


def truncate_name(name: str, gst_invoice: bool) -> str:
    limit = 35 if gst_invoice else 45
    return name[:limit] + "..." if len(name) > limit else name


def hsn_for(item_type: str) -> str:
    return PRODUCT_HSN if item_type == "product" else SERVICE_HSN


def tax_labels(intra_state: bool, gst_rate: float = GST_RATE) -> list[str]:
    """Summary labels for the tax rows; intra-state supply splits the rate in half."""
    if intra_state:
        half = gst_rate / 2
        return [f"CGST @ {half:g}%", f"SGST @ {half:g}%"]
    return [f"IGST @ {gst_rate:g}%"]


def find_logo(assets_dir: str | Path) -> Optional[Path]:
    for name in LOGO_NAMES:
        candidate = Path(assets_dir) / name
        if candidate.is_file():
            return candidate
    return None


def _load_logo(path: Optional[Path]) -> Optional[ImageReader]:
    if path is None:
        return None
    try:
        reader = ImageReader(str(path))
        reader.getSize()
        return reader
    except (OSError, ValueError) as e:
        logger.warning("invoice_logo_unreadable", path=str(path), error=str(e))
        return None


def rows_that_fit(item_count: int, page_height: float = A4[1]) -> int:
    """How many line items are drawn before the table reaches the summary area."""
    y = page_height - TABLE_TOP - 25
    drawn = 0
    while drawn < item_count:
        drawn += 1
        y -= ROW_HEIGHT
        if y < SUMMARY_FLOOR:
            break
    return drawn


def _panel(pdf: canvas.Canvas, x: float, y: float, width: float, height: float) -> None:
    pdf.setFillColor(PANEL)
    pdf.setStrokeColor(RULE)
    pdf.setLineWidth(1)
    pdf.rect(x, y, width, height, stroke=1, fill=1)


def _text(pdf: canvas.Canvas, x: float, y: float, value: str, size: float = 9,
          bold: bool = False, color: Color = TEXT) -> None:
    pdf.setFont(FONT_BOLD if bold else FONT, size)
    pdf.setFillColor(color)
    pdf.drawString(x, y, value)


def render_invoice(
    order,
    items: Sequence,
    business,
    invoice_number: str,
    issued_on: date,
    logo_path: Optional[Path] = None,
    gst_rate: float = GST_RATE,
) -> bytes:
    """Draw the invoice for an order and return the PDF bytes."""
    gst_invoice = bool(order.buyer_gstin)
    intra_state = (order.cgst_amount or 0) > 0
    width, height = A4
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f"Invoice {invoice_number}")

    # Seller header
    y = height - 50
    logo = _load_logo(logo_path)
    text_x = MARGIN
    if logo is not None:
        logo_w, logo_h = logo.getSize()
        draw_w = min(logo_w * 0.5, 120)
        draw_h = draw_w / logo_w * logo_h
        pdf.drawImage(logo, MARGIN, y - draw_h + 20, width=draw_w, height=draw_h, mask="auto")
        text_x = 180

    _text(pdf, text_x, y, business.trade_name or business.legal_name, size=20, bold=True, color=PRIMARY)
    y -= 18
    address = business.address_line1 + (f", {business.address_line2}" if business.address_line2 else "")
    _text(pdf, text_x, y, address, color=MUTED)
    y -= 12
    _text(pdf, text_x, y, f"{business.city}, {business.state} - {business.pincode}", color=MUTED)
    if business.gstin:
        y -= 12
        _text(pdf, text_x, y, f"GSTIN: {business.gstin}", bold=True)

    # Invoice meta
    meta_x = width - 150
    _text(pdf, meta_x, height - 50, "TAX INVOICE" if gst_invoice else "INVOICE", size=18, bold=True, color=PRIMARY)
    _text(pdf, meta_x, height - 70, f"Invoice #: {invoice_number}")
    _text(pdf, meta_x, height - 82, f"Date: {issued_on.strftime('%d/%m/%Y')}")
    _text(pdf, meta_x, height - 94, f"Order #: {order.order_number}")

    pdf.setStrokeColor(PRIMARY)
    pdf.setLineWidth(2)
    pdf.line(MARGIN, height - 120, width - MARGIN, height - 120)

    # Bill to
    y = height - 150
    _panel(pdf, MARGIN, y - 80, 240, 90)
    _text(pdf, 60, y, "BILL TO", size=8, color=MUTED)
    y -= 15
    _text(pdf, 60, y, order.customer_name, size=10, bold=True)
    y -= 12
    for line in (order.shipping_address or "Address not provided").split("\n")[:3]:
        _text(pdf, 60, y, line[:40])
        y -= 11
    _text(pdf, 60, y, order.customer_email or "")
    y -= 11
    if order.buyer_gstin:
        _text(pdf, 60, y, f"GSTIN: {order.buyer_gstin}", bold=True)

    # Place of supply
    if gst_invoice and order.buyer_state:
        box_y = height - 180
        _panel(pdf, 305, box_y - 80, 240, 90)
        _text(pdf, 315, box_y, "PLACE OF SUPPLY", size=8, color=MUTED)
        _text(pdf, 315, box_y - 15, f"{order.buyer_state} ({order.buyer_state_code or ''})", size=10, bold=True)
        _text(pdf, 315, box_y - 30, "Intra-State Supply" if intra_state else "Inter-State Supply", color=MUTED)

    # Line items
    columns = GST_COLUMNS if gst_invoice else PLAIN_COLUMNS
    y = height - TABLE_TOP
    pdf.setFillColor(PRIMARY)
    pdf.rect(MARGIN, y - 5, width - 2 * MARGIN, 22, stroke=0, fill=1)
    x = 55
    for title, col_width in columns:
        _text(pdf, x, y, title, bold=True, color=white)
        x += col_width

    y -= 25
    fitting = rows_that_fit(len(items), height)
    for index, item in enumerate(items[:fitting]):
        if index % 2 == 1:
            pdf.setFillColor(PANEL)
            pdf.rect(MARGIN, y - 5, width - 2 * MARGIN, ROW_HEIGHT, stroke=0, fill=1)
        cells = [str(index + 1), truncate_name(item.item_name, gst_invoice)]
        if gst_invoice:
            cells.append(hsn_for(item.item_type))
        cells += [str(item.quantity), format_inr(item.unit_price), format_inr(item.total_price)]
        x = 55
        for position, (cell, (_, col_width)) in enumerate(zip(cells, columns)):
            _text(pdf, x, y, cell, bold=position == len(cells) - 1)
            x += col_width
        y -= ROW_HEIGHT
    if fitting < len(items):
        logger.warning("invoice_items_truncated", invoice_number=invoice_number, drawn=fitting, total=len(items))

    pdf.setStrokeColor(RULE)
    pdf.setLineWidth(1)
    pdf.line(MARGIN, y + 5, width - MARGIN, y + 5)

    # Summary
    y -= 20
    summary_x = width - 200

    def summary_row(label: str, value: str) -> None:
        nonlocal y
        _text(pdf, summary_x, y, label)
        _text(pdf, width - 100, y, value)
        y -= 18

    summary_row("Subtotal", format_inr(order.subtotal))
    if gst_invoice:
        summary_row("Taxable Amount", format_inr(order.taxable_amount or order.subtotal))
        amounts = [order.cgst_amount, order.sgst_amount] if intra_state else [order.igst_amount]
        for label, amount in zip(tax_labels(intra_state, gst_rate), amounts):
            summary_row(label, format_inr(amount))
    if (order.shipping_cost or 0) > 0:
        summary_row("Shipping", format_inr(order.shipping_cost))

    pdf.setStrokeColor(PRIMARY)
    pdf.setLineWidth(2)
    pdf.line(summary_x - 10, y + 10, width - MARGIN, y + 10)
    y -= 5
    _text(pdf, summary_x, y, "TOTAL", size=12, bold=True, color=PRIMARY)
    _text(pdf, width - 100, y, format_inr(order.total_amount), size=12, bold=True, color=PRIMARY)
    y -= 40

    # Bank details
    if business.bank_name and business.bank_account_number:
        _panel(pdf, MARGIN, y - 60, 250, 75)
        _text(pdf, 60, y, "BANK DETAILS", size=8, color=MUTED)
        y -= 15
        _text(pdf, 60, y, f"Bank: {business.bank_name}")
        y -= 12
        _text(pdf, 60, y, f"Account: {business.bank_account_number}")
        y -= 12
        _text(pdf, 60, y, f"IFSC: {business.bank_ifsc or 'N/A'}")
        if business.bank_branch:
            y -= 12
            _text(pdf, 60, y, f"Branch: {business.bank_branch}")

    # Footer
    _text(pdf, MARGIN, 50, "This is a computer generated invoice and does not require a signature.", size=8, color=MUTED)
    if business.email or business.phone:
        contact = f"Contact: {business.email or ''} {'| ' + business.phone if business.phone else ''}"
        _text(pdf, MARGIN, 38, contact, size=8, color=MUTED)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
