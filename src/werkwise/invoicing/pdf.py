from __future__ import annotations

import html
import io
import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..system.model import InvoiceSettings
from .model import Invoice

logger = logging.getLogger(__name__)

_BRAND_RED = colors.Color(220 / 255, 38 / 255, 38 / 255)


def _money(value: float) -> str:
    return f"{value:.2f}"


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="Company", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=12, leading=15))
    styles.add(ParagraphStyle(name="Small", parent=styles["Normal"], fontSize=9, leading=12))
    styles.add(ParagraphStyle(name="Title18", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=18, leading=22, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name="Right", parent=styles["Normal"], fontSize=10, leading=14, alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name="Tiny", parent=styles["Normal"], fontSize=8, leading=10))
    styles.add(ParagraphStyle(name="Footer", parent=styles["Normal"], fontSize=9, leading=12, alignment=TA_CENTER))
    return styles


def _company_block(settings: InvoiceSettings, styles) -> list:
    lines = [Paragraph(html.escape(settings.company_name), styles["Company"])]
    details = []
    if settings.address_street:
        details.append(settings.address_street)
    if settings.address_zip or settings.address_city:
        details.append(f"{settings.address_zip or ''} {settings.address_city or ''}")
    if settings.phone:
        details.append(f"Tel: {settings.phone}")
    if settings.email:
        details.append(f"Email: {settings.email}")
    if settings.website:
        details.append(settings.website)
    if details:
        lines.append(Paragraph("<br/>".join(html.escape(d) for d in details), styles["Small"]))
    return lines


def _logo(settings: InvoiceSettings):
    if not settings.logo_path:
        return None
    path = Path(settings.logo_path)
    if not path.exists():
        logger.warning("Invoice logo not found: %s", path)
        return None
    return Image(str(path), width=40 * mm, height=20 * mm, kind="proportional")


def render_invoice_pdf(invoice: Invoice, settings: InvoiceSettings) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=18 * mm,
        title=f"Factuur {invoice.factuur_nummer}",
    )
    styles = _styles()
    story: list[object] = []

    logo = _logo(settings)
    if logo is not None:
        story.append(logo)
        story.append(Spacer(1, 6))

    invoice_block = [
        Paragraph("FACTUUR", styles["Title18"]),
        Paragraph(
            f"Factuurnummer: {html.escape(invoice.factuur_nummer)}<br/>"
            f"Factuurdatum: {invoice.factuur_datum}<br/>"
            f"Vervaldatum: {invoice.vervaldatum}",
            styles["Right"],
        ),
    ]
    header = Table([[_company_block(settings, styles), invoice_block]], colWidths=[doc.width * 0.55, doc.width * 0.45])
    header.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP"), ("LEFTPADDING", (0, 0), (-1, -1), 0)]))
    story.append(header)
    story.append(Spacer(1, 14))

    story.append(Paragraph("<b>Project:</b>", styles["Normal"]))
    story.append(Paragraph(html.escape(f"{invoice.project_naam} ({invoice.project_nummer or ''})"), styles["Normal"]))
    story.append(Spacer(1, 8))

    table_data = [["Datum", "Medewerker", "Uren", "Tarief (€/uur)", "Subtotaal (€)"]]
    for line in invoice.lines:
        table_data.append([line.datum, line.naam, _money(line.uren), _money(line.tarief), _money(line.subtotaal)])
    table_data.append(["", "Totaal:", f"{_money(invoice.totaal_uren)} uur", "", _money(invoice.totaal_bedrag)])

    col_widths = [doc.width * 0.16, doc.width * 0.36, doc.width * 0.14, doc.width * 0.17, doc.width * 0.17]
    lines_table = Table(table_data, colWidths=col_widths, repeatRows=1)
    lines_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _BRAND_RED),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, -2), 0.5, colors.grey),
                ("BACKGROUND", (0, -1), (-1, -1), colors.Color(240 / 255, 240 / 255, 240 / 255)),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("BOX", (0, -1), (-1, -1), 0.5, colors.grey),
            ]
        )
    )
    story.append(lines_table)
    story.append(Spacer(1, 10))

    totals = Table(
        [
            ["Subtotaal:", f"€ {_money(invoice.totaal_bedrag)}"],
            ["BTW (21%):", f"€ {_money(invoice.btw_bedrag)}"],
            ["Totaal incl. BTW:", f"€ {_money(invoice.totaal_incl_btw)}"],
        ],
        colWidths=[doc.width * 0.25, doc.width * 0.2],
        hAlign="RIGHT",
    )
    totals.setStyle(
        TableStyle(
            [
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("FONTSIZE", (0, 0), (-1, 1), 10),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, -1), (-1, -1), 12),
                ("TOPPADDING", (0, -1), (-1, -1), 6),
            ]
        )
    )
    story.append(totals)
    story.append(Spacer(1, 20))

    registration = []
    if settings.kvk_number:
        registration.append(f"KVK: {settings.kvk_number}")
    if settings.btw_number:
        registration.append(f"BTW: {settings.btw_number}")
    if settings.iban:
        registration.append(f"IBAN: {settings.iban}")
    if registration:
        story.append(Paragraph("<br/>".join(html.escape(r) for r in registration), styles["Tiny"]))

    if settings.invoice_footer:
        story.append(Spacer(1, 24))
        story.append(Paragraph(html.escape(settings.invoice_footer).replace("\n", "<br/>"), styles["Footer"]))

    doc.build(story)
    return buffer.getvalue()
