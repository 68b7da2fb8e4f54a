from __future__ import annotations

from datetime import date, datetime

from werkwise.core.enums import ProjectStatus, RegistrationStatus, TransactionType
from werkwise.exports.csv_export import (
    BOM,
    bookings_import_template,
    escape_value,
    export_bookings,
    export_filename,
    export_inventory_items,
    export_location_stock,
    export_project,
    export_time_registrations,
    location_stock_filename,
)
from werkwise.exports.xlsx_export import registrations_to_xlsx
from werkwise.inventory.model import InventoryTransaction, Location, Product, StockItem
from werkwise.projects.model import Project
from werkwise.registrations.model import MaterialLine, TimeRegistration


def _registration(**overrides) -> TimeRegistration:
    data = dict(
        id=1,
        user_id=3,
        project_id=1,
        project_naam="Villa",
        datum=date(2025, 10, 14),
        werktype="meerwerk",
        aantal_uren=7.5,
        werkomschrijving="Tegels; voegen",
        status=RegistrationStatus.SUBMITTED,
        materials=(MaterialLine(type="product", quantity=3.0, unit="zak", product_name="Tegellijm"),),
        user_naam="Pieter",
    )
    data.update(overrides)
    return TimeRegistration(**data)


def test_escape_value_quotes_separator_quotes_and_newlines():
    assert escape_value("plain", ";") == "plain"
    assert escape_value("a;b", ";") == '"a;b"'
    assert escape_value('zeg "hoi"', ";") == '"zeg ""hoi"""'
    assert escape_value("regel\nregel", ",") == '"regel\nregel"'
    assert escape_value("a,b", ";") == "a,b"
    assert escape_value(None, ";") == ""


def test_export_time_registrations_layout():
    text = export_time_registrations([_registration()], ";")
    assert text.startswith(BOM)

    header, row = text[len(BOM):].split("\n")
    assert header == (
        "Datum;Gebruiker;Project;Werktype;Uren;Omschrijving;Kilometers;Materiaal (tekst);Materiaal (afgeboekt)"
    )
    assert row == '14/10/2025;Pieter;Villa;meerwerk;7,5;"Tegels; voegen";0;;Tegellijm: 3 zak'


def test_export_time_registrations_quotes_decimal_comma_with_comma_separator():
    text = export_time_registrations([_registration(werkomschrijving="Tegels")], ",")
    row = text.split("\n")[1]
    assert row.startswith('14/10/2025,Pieter,Villa,meerwerk,"7,5",Tegels,0,')


def test_export_inventory_items_uses_minimum_stock_column():
    text = export_inventory_items(
        [
            {
                "naam": "Tegellijm",
                "barcode": "871",
                "categorie": "Lijmen",
                "locatie": "Bus 2",
                "voorraad": 12.0,
                "minimumvoorraad": 25,
                "eenheid": "zak",
                "prijs": 18.0,
                "leverancier": None,
            }
        ],
        ";",
    )
    lines = text[len(BOM):].split("\n")
    assert lines[0].split(";")[5] == "Minimum Voorraad"
    assert lines[1] == "Tegellijm;871;Lijmen;Bus 2;12;25;zak;18;"


def test_export_bookings_uses_absolute_quantity():
    tx = InventoryTransaction(
        id=1,
        product_id=1,
        location_id=1,
        transaction_type=TransactionType.OUT,
        quantity=-4.0,
        project_id=1,
        created_at=datetime(2025, 10, 14, 10, 0),
        product_name="Tegellijm",
        product_sku="TL-25",
        product_unit="zak",
        location_name="Bus 2",
        user_naam="Pieter",
        project_naam="Villa",
        project_nummer="P-12",
    )
    row = export_bookings([tx], ";").split("\n")[1]
    assert row == "14/10/2025;Villa (#P-12);Tegellijm (TL-25);;4;zak;Bus 2;Pieter;"


def test_bookings_import_template_header():
    lines = bookings_import_template(";").split("\n")
    assert lines[0] == BOM + "Datum;Project;Product SKU;Aantal;Locatie;Opmerkingen"
    assert len(lines) == 3


def test_export_project_sections_and_padding():
    project = Project(
        id=1,
        naam="Villa",
        status=ProjectStatus.ACTIEF,
        project_nummer="P-12",
        start_datum=date(2025, 9, 1),
        progress_percentage=40,
    )
    regs = [
        _registration(werkomschrijving="Tegels, voegen", user_naam=None, user_id=9, created_at=datetime(2025, 10, 14, 8, 0, 0)),
        _registration(id=2, aantal_uren=5.0, werkomschrijving="Kitten"),
    ]
    text = export_project(project, regs, [], total_hours=12.5, separator=";", users={9: "Emma"})
    lines = text[len(BOM):].split("\n")

    assert lines[0] == "PROJECT INFORMATIE" + ";" * 10
    assert "Totaal uren geregistreerd;12.5h" + ";" * 9 in lines
    assert "Voortgang percentage;40%" + ";" * 9 in lines

    header_index = lines.index(
        "Datum;Werknemer;Werktype;Aantal Uren;Kilometers;Werkomschrijving;Locatie;Voortgang %;Status;"
        "Project Naam;Aangemaakt op;Laatst gewijzigd"
    )
    first = lines[header_index + 1]
    assert first.startswith('14/10/2025;Emma;meerwerk;7.5;0;"Tegels, voegen";;0;submitted;Villa;14-10-2025 08:00:00;')
    assert "MATERIALEN" + ";" * 10 in lines


def test_export_location_stock_layout():
    location = Location(id=2, name="Bus  2 Jan", type="bus")
    items = [
        StockItem(
            product=Product(id=1, name="Tegellijm", sku="TL-25", category="Lijmen", unit="zak", minimum_stock=25),
            location=location,
            quantity=12.0,
        ),
        StockItem(
            product=Product(id=2, name="Kit; wit", category="Kitten", unit="koker", ean="8712345678906"),
            location=location,
            quantity=2.5,
        ),
    ]

    lines = export_location_stock(items, ";").split("\n")

    assert lines[0] == BOM + "SKU;Naam;Categorie;Voorraad;Eenheid;Min. Voorraad;EAN"
    assert lines[1] == "TL-25;Tegellijm;Lijmen;12;zak;25;"
    assert lines[2] == ';"Kit; wit";Kitten;2.5;koker;0;8712345678906'
    assert location_stock_filename(location, date(2025, 10, 14)) == "voorraad_Bus_2_Jan_2025-10-14.csv"


def test_export_filename():
    assert export_filename("urenregistraties", date(2025, 10, 14)) == "urenregistraties_2025-10-14.csv"


def test_registrations_to_xlsx_produces_workbook():
    data = registrations_to_xlsx([_registration()])
    assert data[:2] == b"PK"
