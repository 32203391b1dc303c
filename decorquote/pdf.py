# decorquote/pdf.py
from __future__ import annotations

from io import BytesIO
from xml.sax.saxutils import escape
from typing import Any, Dict, List, Mapping, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .formatting import format_currency, format_date
from .records import CompanySettings, PdfTemplate
from .wedding import FLOWERS, GREENERY, WEDDING_AREAS, WEDDING_STYLES, decode_selections, resolve_names

DEFAULT_ACCENT = "#B76E79"  # rose gold
OTHER_SECTION = "Other"


def group_by_section(items: Sequence[Mapping[str, Any]]) -> Dict[str, List[Mapping[str, Any]]]:
    """Items per section, sections in order of first appearance by sort_order."""
    groups: Dict[str, List[Mapping[str, Any]]] = {}
    for it in sorted(items, key=lambda i: i.get("sort_order", 0)):
        groups.setdefault(it.get("section") or OTHER_SECTION, []).append(it)
    return groups


def section_subtotal(items: Sequence[Mapping[str, Any]]) -> float:
    return sum(float(i.get("amount", 0) or 0) for i in items if not i.get("is_gift"))


def _color(value: Optional[str]):
    try:
        return colors.HexColor(value or DEFAULT_ACCENT)
    except ValueError:
        return colors.HexColor(DEFAULT_ACCENT)


def render_quote_pdf(quote: Mapping[str, Any],
                     items: Sequence[Mapping[str, Any]],
                     wedding: Optional[Mapping[str, Any]],
                     plans: Sequence[Mapping[str, Any]],
                     settings: CompanySettings,
                     accent_color: Optional[str] = None,
                     template: Optional[str] = None) -> bytes:
    """
    Lay out a saved quote as PDF.

    Subtotal and total are printed as stored on the quote; nothing here
    recomputes them.
    """
    template = PdfTemplate(template or settings.default_template)
    accent = _color(accent_color)
    header_bg = accent if template is PdfTemplate.ELEGANT else colors.HexColor("#333333")

    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=18 * mm, rightMargin=18 * mm,
                            topMargin=16 * mm, bottomMargin=16 * mm,
                            title=f"Quote {quote.get('number', '')}")
    styles = getSampleStyleSheet()
    elems = []

    # ---- company & quote header ----
    elems.append(Paragraph(escape(settings.company_name), styles["Title"]))
    contact = " · ".join(x for x in (settings.address, settings.phone, settings.email) if x)
    if contact:
        elems.append(Paragraph(escape(contact), styles["Normal"]))
    if settings.vat_number:
        elems.append(Paragraph(f"VAT no. {escape(settings.vat_number)}", styles["Normal"]))
    elems.append(Spacer(1, 8))

    elems.append(Paragraph(f"Quote {escape(str(quote.get('number', '')))}", styles["Heading2"]))
    meta = [
        ("Client", quote.get("client_name", "")),
        ("Event date", format_date(quote.get("event_date"))),
        ("Location", quote.get("event_location", "")),
        ("Guests", str(quote.get("guest_count") or "")),
        ("Valid until", format_date(quote.get("expiry_date"))),
    ]
    for label, value in meta:
        if value:
            elems.append(Paragraph(f"<b>{label}:</b> {escape(str(value))}", styles["Normal"]))
    elems.append(Spacer(1, 8))

    # ---- wedding details ----
    if wedding:
        sel = decode_selections(wedding)
        couple = " & ".join(x for x in (wedding.get("bride_name"), wedding.get("groom_name")) if x)
        style_name = resolve_names([wedding.get("style", "")], WEDDING_STYLES)
        lines = [
            ("Couple", couple),
            ("Church", wedding.get("church_name", "")),
            ("Reception", wedding.get("reception_name", "")),
            ("Palette", wedding.get("palette", "")),
            ("Style", ", ".join(style_name)),
            ("Flowers", ", ".join(resolve_names(sel.flowers, FLOWERS))),
            ("Greenery", ", ".join(resolve_names(sel.greenery, GREENERY))),
            ("Areas", ", ".join(resolve_names(sel.areas, WEDDING_AREAS))),
        ]
        elems.append(Paragraph("Wedding details", styles["Heading3"]))
        for label, value in lines:
            if value:
                elems.append(Paragraph(f"<b>{label}:</b> {escape(str(value))}", styles["Normal"]))
        if sel.palette_colors:
            swatches = Table([[""] * len(sel.palette_colors)], colWidths=[10 * mm] * len(sel.palette_colors),
                             rowHeights=[6 * mm], hAlign="LEFT")
            swatches.setStyle(TableStyle(
                [("BACKGROUND", (i, 0), (i, 0), _color(c)) for i, c in enumerate(sel.palette_colors)]
                + [("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey)]
            ))
            elems.append(Spacer(1, 4))
            elems.append(swatches)
        elems.append(Spacer(1, 8))

    # ---- items per section ----
    table_style = [
        ("BACKGROUND", (0, 0), (-1, 0), header_bg),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
    ]
    if not items:
        elems.append(Paragraph("No items.", styles["Normal"]))
    for section, rows in group_by_section(items).items():
        elems.append(Paragraph(escape(section), styles["Heading3"]))
        data = [["Description", "Qty", "Unit price", "Amount"]]
        for it in rows:
            amount = "Gift" if it.get("is_gift") else format_currency(it.get("amount"))
            data.append([
                Paragraph(escape(str(it.get("description", ""))), styles["Normal"]),
                str(it.get("quantity", "")),
                format_currency(it.get("unit_price")),
                amount,
            ])
        data.append(["", "", "Section total", format_currency(section_subtotal(rows))])
        t = Table(data, colWidths=[95 * mm, 15 * mm, 30 * mm, 30 * mm], hAlign="LEFT")
        t.setStyle(TableStyle(table_style + [("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold")]))
        elems.append(t)
        elems.append(Spacer(1, 6))

    # ---- totals (as stored) ----
    totals = [["Subtotal", format_currency(quote.get("subtotal"))]]
    if quote.get("discount_type") and float(quote.get("discount_value") or 0) > 0:
        disc = quote["discount_value"]
        label = f"Discount {disc:g}%" if quote["discount_type"] == "percentage" else "Discount"
        if quote.get("discount_note"):
            label += f" ({quote['discount_note']})"
        totals.append([label, "" if quote["discount_type"] == "percentage" else f"- {format_currency(disc)}"])
    if float(quote.get("tax_rate") or 0) > 0:
        totals.append([f"VAT {float(quote['tax_rate']):g}% included", ""])
    totals.append(["Total", format_currency(quote.get("total"))])
    tt = Table(totals, colWidths=[140 * mm, 30 * mm], hAlign="LEFT")
    tt.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 1, accent),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
    ]))
    elems.append(tt)
    elems.append(Spacer(1, 10))

    # ---- payment plan ----
    if plans:
        elems.append(Paragraph("Payment plan", styles["Heading3"]))
        data = [["Instalment", "%", "Amount", "Due"]]
        for p in sorted(plans, key=lambda r: r.get("sort_order", 0)):
            data.append([p.get("description", ""), f"{float(p.get('percentage') or 0):g}%",
                         format_currency(p.get("amount")), format_date(p.get("due_date"))])
        pt = Table(data, colWidths=[80 * mm, 20 * mm, 35 * mm, 35 * mm], hAlign="LEFT")
        pt.setStyle(TableStyle(table_style))
        elems.append(pt)
        elems.append(Spacer(1, 10))

    # ---- notes & conditions ----
    for title, text in (("Notes", quote.get("client_notes")), ("Conditions", quote.get("conditions"))):
        if text:
            elems.append(Paragraph(title, styles["Heading4"]))
            elems.append(Paragraph(escape(str(text)), styles["Normal"]))

    doc.build(elems)
    pdf = buf.getvalue()
    buf.close()
    return pdf
