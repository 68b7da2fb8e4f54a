"""CSV exports in the layout the office opens in Excel.

Every file starts with a UTF-8 byte order mark, rows are joined with a bare
newline and the separator comes from the system settings (`,` or `;`).
"""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import format_date, format_nl_datetime
from ..common.formatting import format_number
from ..core.constants import DEFAULT_CSV_SEPARATOR
from ..inventory.model import InventoryTransaction, Location, StockItem
from ..projects.model import Project
from ..registrations.model import TimeRegistration

BOM = "\ufeff"

REGISTRATION_HEADERS = [
    "Datum",
    "Gebruiker",
    "Project",
    "Werktype",
    "Uren",
    "Omschrijving",
    "Kilometers",
    "Materiaal (tekst)",
    "Materiaal (afgeboekt)",
]

INVENTORY_HEADERS = [
    "Naam",
    "Barcode",
    "Categorie",
    "Locatie",
    "Voorraad",
    "Minimum Voorraad",
    "Eenheid",
    "Prijs",
    "Leverancier",
]

BOOKING_HEADERS = [
    "Datum",
    "Project",
    "Product",
    "Categorie",
    "Aantal",
    "Eenheid",
    "Locatie",
    "Medewerker",
    "Opmerkingen",
]

LOCATION_STOCK_HEADERS = ["SKU", "Naam", "Categorie", "Voorraad", "Eenheid", "Min. Voorraad", "EAN"]

BOOKING_TEMPLATE_HEADERS = ["Datum", "Project", "Product SKU", "Aantal", "Locatie", "Opmerkingen"]

PROJECT_WIDTH = 11
PROJECT_REGISTRATION_HEADERS = [
    "Datum",
    "Werknemer",
    "Werktype",
    "Aantal Uren",
    "Kilometers",
    "Werkomschrijving",
    "Locatie",
    "Voortgang %",
    "Status",
    "Project Naam",
    "Aangemaakt op",
    "Laatst gewijzigd",
]
PROJECT_MATERIAL_HEADERS = ["Datum", "Product", "SKU", "Aantal", "Eenheid", "Locatie", "Gebruiker", "Notities"]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return format_number(value)


def escape_value(value: Any, separator: str, *, extra: str = "") -> str:
    # Hand-written rather than csv.writer: only the separator, `"` and `\n` trigger quoting
    # (csv also quotes `\r`), and project sheets must additionally quote commas.
    text = _text(value)
    if any(ch in text for ch in (separator, '"', "\n", *extra)):
        return '"' + text.replace('"', '""') + '"'
    return text


def header_key(header: str) -> str:
    """Row key for a header: lower case, whitespace removed ("Minimum Voorraad" -> "minimumvoorraad")."""
    return "".join(header.lower().split())


def to_csv(rows: Iterable[Mapping[str, Any]], headers: Sequence[str], separator: str = DEFAULT_CSV_SEPARATOR) -> str:
    keys = [header_key(h) for h in headers]
    lines = [separator.join(headers)]
    for row in rows:
        lines.append(separator.join(escape_value(row.get(k), separator) for k in keys))
    return BOM + "\n".join(lines)


def _grid_to_csv(grid: Iterable[Sequence[Any]], separator: str) -> str:
    # Project sheets also quote commas so they survive either separator.
    return BOM + "\n".join(separator.join(escape_value(v, separator, extra=",") for v in row) for row in grid)


def export_filename(base: str, today: date) -> str:
    return f"{base}_{today.isoformat()}.csv"


def _decimal_comma(value: Any) -> str:
    return format_number(value).replace(".", ",")


def _material_summary(registration: TimeRegistration) -> str:
    return "; ".join(
        f"{m.label}: {format_number(m.quantity)} {m.unit}" for m in registration.materials
    )


def export_time_registrations(
    registrations: Iterable[TimeRegistration], separator: str = DEFAULT_CSV_SEPARATOR
) -> str:
    rows = [
        {
            "datum": format_date(reg.datum),
            "gebruiker": reg.user_naam or "",
            "project": reg.project_naam or reg.project_display_naam or "",
            "werktype": reg.werktype,
            "uren": _decimal_comma(reg.aantal_uren),
            "omschrijving": reg.werkomschrijving or "",
            "kilometers": _decimal_comma(reg.driven_kilometers) if reg.driven_kilometers else "0",
            "materiaal(tekst)": reg.verbruikt_materiaal or "",
            "materiaal(afgeboekt)": _material_summary(reg),
        }
        for reg in registrations
    ]
    return to_csv(rows, REGISTRATION_HEADERS, separator)


def export_inventory_items(items: Iterable[Mapping[str, Any]], separator: str = DEFAULT_CSV_SEPARATOR) -> str:
    """`items` are flat stock rows keyed like the headers (see InventoryService.inventory_items)."""
    rows = [
        {
            "naam": item.get("naam"),
            "barcode": item.get("barcode") or "",
            "categorie": item.get("categorie"),
            "locatie": item.get("locatie"),
            "voorraad": item.get("voorraad"),
            "minimumvoorraad": item.get("minimumvoorraad"),
            "eenheid": item.get("eenheid"),
            "prijs": item.get("prijs") or "",
            "leverancier": item.get("leverancier") or "",
        }
        for item in items
    ]
    return to_csv(rows, INVENTORY_HEADERS, separator)


def export_location_stock(items: Iterable[StockItem], separator: str = DEFAULT_CSV_SEPARATOR) -> str:
    """One location's stock; the import reads SKU and Voorraad back from the same layout."""
    rows = [
        {
            "sku": item.product.sku or "",
            "naam": item.product.name,
            "categorie": item.product.category,
            "voorraad": item.quantity,
            "eenheid": item.product.unit,
            "min.voorraad": item.product.minimum_stock or 0,
            "ean": item.product.ean or "",
        }
        for item in items
    ]
    return to_csv(rows, LOCATION_STOCK_HEADERS, separator)


def location_stock_filename(location: Location, today: date) -> str:
    return export_filename("voorraad_" + "_".join(location.name.split()), today)


def export_bookings(
    transactions: Iterable[InventoryTransaction], separator: str = DEFAULT_CSV_SEPARATOR
) -> str:
    rows = []
    for t in transactions:
        nummer = f"(#{t.project_nummer})" if t.project_nummer else ""
        rows.append(
            {
                "datum": format_date(t.created_at) if t.created_at else "",
                "project": f"{t.project_naam or ''} {nummer}",
                "product": f"{t.product_name or ''} ({t.product_sku or ''})",
                "categorie": t.product_category or "",
                "aantal": abs(t.quantity),
                "eenheid": t.product_unit or "",
                "locatie": t.location_name or "",
                "medewerker": t.user_naam or "",
                "opmerkingen": t.notes or "",
            }
        )
    return to_csv(rows, BOOKING_HEADERS, separator)


def bookings_import_template(separator: str = DEFAULT_CSV_SEPARATOR) -> str:
    example = [
        ["14-10-2025", "J. Raaijmakers", "CEM-25KG", "3", "Magazijn Moordrecht", "Afgeboekt naar project"],
        ["14-10-2025", "A.S. Schuch", "AFD-FOL-45", "5", "Bus 2", "Materiaal gebruikt"],
    ]
    return BOM + "\n".join(separator.join(row) for row in [BOOKING_TEMPLATE_HEADERS, *example])


def _pad(values: Sequence[Any], width: int = PROJECT_WIDTH) -> list[Any]:
    return list(values) + [""] * (width - len(values))


def export_project(
    project: Project,
    registrations: Sequence[TimeRegistration],
    materials: Sequence[InventoryTransaction],
    total_hours: float,
    separator: str = DEFAULT_CSV_SEPARATOR,
    users: Optional[Mapping[int, str]] = None,
) -> str:
    """Full project sheet: info block, registrations block, materials block."""
    users = users or {}

    info = [
        _pad(["PROJECT INFORMATIE"]),
        _pad(["Veld", "Waarde"]),
        _pad(["Projectnaam", project.naam]),
        _pad(["Projectnummer", project.project_nummer or "N/A"]),
        _pad(["Status", project.status.value]),
        _pad(["Beschrijving", project.beschrijving or ""]),
        _pad(["Start datum", format_date(project.start_datum) if project.start_datum else ""]),
        _pad(["Voortgang percentage", f"{project.progress_percentage}%" if project.progress_percentage else "0%"]),
        _pad(["Totaal uren geregistreerd", f"{total_hours:.1f}h"]),
        _pad(["Berekende uren", f"{format_number(project.calculated_hours)}h" if project.calculated_hours else "N/A"]),
        _pad(["Oppervlakte", f"{format_number(project.oppervlakte_m2)} m²" if project.oppervlakte_m2 else "N/A"]),
        _pad([]),
        _pad(["URENREGISTRATIES"]),
    ]

    registration_rows = [
        [
            format_date(reg.datum),
            reg.user_naam or users.get(reg.user_id) or "Onbekend",
            reg.werktype or "",
            reg.aantal_uren or 0,
            reg.driven_kilometers or 0,
            reg.werkomschrijving or "",
            reg.locatie or "",
            reg.progress_percentage or 0,
            reg.status.value,
            reg.project_naam or project.naam,
            format_nl_datetime(reg.created_at) if reg.created_at else "",
            format_nl_datetime(reg.updated_at) if reg.updated_at else "",
        ]
        for reg in registrations
    ]

    material_rows = [
        _pad(
            [
                format_date(t.created_at) if t.created_at else "",
                t.product_name or "Onbekend",
                t.product_sku or "N/A",
                t.quantity or 0,
                t.product_unit or "",
                t.location_name or "N/A",
                t.user_naam or "Onbekend",
                t.notes or "",
            ]
        )
        for t in materials
    ]

    grid = [
        *info,
        PROJECT_REGISTRATION_HEADERS,
        *registration_rows,
        _pad([]),
        _pad(["MATERIALEN"]),
        _pad(PROJECT_MATERIAL_HEADERS),
        *material_rows,
    ]
    return _grid_to_csv(grid, separator)
