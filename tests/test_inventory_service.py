from __future__ import annotations

import pytest

from fakes import InMemoryInventory, InMemoryProjects, InMemorySettings
from werkwise.core.enums import ProjectStatus, Role, TransactionType
from werkwise.core.exceptions import AuthorizationError, InsufficientStockError, ValidationError
from werkwise.inventory.model import Location, Product
from werkwise.inventory.service import InventoryService
from werkwise.projects.model import Project
from werkwise.system.model import SystemSettings
from werkwise.system.service import SettingsService


def _build(system: SystemSettings = None):
    inventory = InMemoryInventory(
        products=[
            Product(id=1, name="Tegellijm", sku="TL-25", category="Lijmen", unit="zak", minimum_stock=25),
            Product(id=2, name="Kit", sku="KIT-1", category="Kitten", unit="koker", minimum_stock=3),
        ],
        locations=[
            Location(id=1, name="Magazijn Moordrecht", type="magazijn"),
            Location(id=2, name="Bus 2", type="bus", license_plate="AB-123-CD"),
        ],
    )
    inventory.stock = {(1, 1): 10.0, (1, 2): 2.0, (2, 1): 4.0}
    projects = InMemoryProjects([Project(id=1, naam="J. Raaijmakers", status=ProjectStatus.ACTIEF)])
    return InventoryService(inventory, projects, SettingsService(InMemorySettings(system))), inventory


def test_book_out_writes_negative_transactions():
    svc, inventory = _build()

    ids = svc.book_out(
        user_id=3,
        project_id=1,
        lines=[
            {"product_id": 1, "location_id": 1, "quantity": 4},
            {"product_id": 2, "location_id": 1, "quantity": "2"},
            {"product_id": "", "location_id": 1, "quantity": 1},
        ],
    )

    assert len(ids) == 2
    assert inventory.stock[(1, 1)] == 6.0
    assert inventory.stock[(2, 1)] == 2.0
    tx = inventory.transactions[0]
    assert tx.transaction_type == TransactionType.OUT
    assert tx.quantity == -4
    assert tx.project_id == 1
    assert tx.notes == "Afgeboekt naar project J. Raaijmakers"


def test_book_out_checks_stock_before_writing():
    svc, inventory = _build()

    with pytest.raises(InsufficientStockError) as exc:
        svc.book_out(
            user_id=3,
            project_id=1,
            lines=[
                {"product_id": 1, "location_id": 1, "quantity": 1},
                {"product_id": 1, "location_id": 2, "quantity": 2},
                {"product_id": 1, "location_id": 2, "quantity": 1},
            ],
        )

    assert str(exc.value) == 'Er is geen voorraad van "Tegellijm" op Bus 2. Beschikbaar: 2 zak, Gevraagd: 3 zak'
    assert inventory.transactions == []
    assert inventory.stock[(1, 1)] == 10.0


@pytest.mark.parametrize(
    "lines, message",
    [
        ([{"product_id": 1, "location_id": None, "quantity": 1}], "Selecteer een locatie voor alle producten"),
        ([{"product_id": 1, "location_id": 1, "quantity": 0}], "Aantal moet minimaal 1 zijn"),
        ([{"product_id": None}], "Voeg minimaal 1 geldig product toe"),
    ],
)
def test_book_out_validation(lines, message):
    svc, _ = _build()
    with pytest.raises(ValidationError) as exc:
        svc.book_out(user_id=3, project_id=1, lines=lines)
    assert str(exc.value) == message


def test_move_stock_between_locations():
    svc, inventory = _build()

    svc.move_stock(current_role=Role.ADMIN, user_id=1, product_id=1, from_location_id=1, to_location_id=2, quantity=5)

    assert inventory.stock[(1, 1)] == 5.0
    assert inventory.stock[(1, 2)] == 7.0
    assert [t.notes for t in inventory.transactions] == ["Verplaatst naar Bus 2", "Verplaatst van Magazijn Moordrecht"]

    with pytest.raises(ValidationError):
        svc.move_stock(current_role=Role.ADMIN, user_id=1, product_id=1, from_location_id=2, to_location_id=2, quantity=1)


def test_set_stock_and_receive_need_manage_permission():
    svc, inventory = _build()

    with pytest.raises(AuthorizationError):
        svc.set_stock(current_role=Role.MEDEWERKER, product_id=1, location_id=1, quantity=3)
    with pytest.raises(ValidationError):
        svc.set_stock(current_role=Role.ADMIN, product_id=1, location_id=1, quantity=-1)

    svc.receive(current_role=Role.KANTOORPERSONEEL, user_id=2, product_id=2, location_id=2, quantity="6")
    assert inventory.stock[(2, 2)] == 6.0
    assert inventory.transactions[-1].transaction_type == TransactionType.IN


def test_low_stock_sums_over_locations():
    svc, _ = _build()

    low = svc.low_stock()

    assert [item["product"]["name"] for item in low] == ["Tegellijm"]
    assert low[0]["total_stock"] == 12.0


def test_create_product_rejects_duplicate_sku():
    svc, _ = _build()
    with pytest.raises(ValidationError):
        svc.create_product(current_role=Role.ADMIN, data={"name": "Andere lijm", "sku": "TL-25"})

    new_id = svc.create_product(current_role=Role.ADMIN, data={"name": "Voegmiddel", "sku": "VM-G01", "minimum_stock": "20"})
    assert new_id == 3


def test_import_bookings_skips_unknown_rows():
    svc, inventory = _build()
    text = "\n".join(
        [
            "\ufeffDatum;Project;Product SKU;Aantal;Locatie;Opmerkingen",
            "14-10-2025;J. Raaijmakers;TL-25;3;Magazijn Moordrecht;Afgeboekt naar project",
            "14-10-2025;Onbekend project;TL-25;1;Bus 2;",
            "14-10-2025;Raaijmakers;NOPE;1;Bus 2;",
            "kort;regel",
            "14-10-2025;Raaijmakers;KIT-1;1,5;Magazijn;",
        ]
    )

    result = svc.import_bookings_csv(text=text, separator=";", user_id=2)

    assert result.imported == 2
    assert result.skipped == ("Project niet gevonden: Onbekend project", "Product niet gevonden: NOPE")
    assert inventory.stock[(1, 1)] == 7.0
    assert inventory.stock[(2, 1)] == 2.5
    assert inventory.transactions[-1].notes == "Geïmporteerd via CSV"


def test_import_bookings_without_usable_rows_fails():
    svc, _ = _build()
    with pytest.raises(ValidationError):
        svc.import_bookings_csv(text="Datum;Project\n", separator=";", user_id=2)
    with pytest.raises(ValidationError):
        svc.import_bookings_csv(text="h\n14-10-2025;Nergens;TL-25;1;Bus 2;", separator=";", user_id=2)


def test_product_prices():
    svc, inventory = _build()

    new_id = svc.create_product(
        current_role=Role.ADMIN,
        data={"name": "Voegmiddel", "sku": "VM-G01", "purchase_price": "7,35", "sale_price": 13.65},
    )
    assert inventory.products[new_id].purchase_price == 7.35
    assert inventory.products[new_id].sale_price == 13.65

    svc.update_product(current_role=Role.ADMIN, product_id=new_id, data={"sale_price": "14"})
    assert inventory.products[new_id].sale_price == 14.0
    assert inventory.products[new_id].purchase_price == 7.35

    with pytest.raises(ValidationError) as exc:
        svc.update_product(current_role=Role.ADMIN, product_id=new_id, data={"purchase_price": -1})
    assert str(exc.value) == "Inkoopprijs mag niet negatief zijn"


def test_location_stock_export_rows():
    svc, _ = _build()

    location, items = svc.location_stock(current_role=Role.ADMIN, location_id=1)
    assert location.name == "Magazijn Moordrecht"
    assert sorted((i.product.sku, i.quantity) for i in items) == [("KIT-1", 4.0), ("TL-25", 10.0)]

    svc.create_location(current_role=Role.ADMIN, data={"name": "Bus 3", "type": "bus"})
    with pytest.raises(ValidationError) as exc:
        svc.location_stock(current_role=Role.ADMIN, location_id=3)
    assert str(exc.value) == "Geen voorraad op deze locatie om te exporteren"
    with pytest.raises(AuthorizationError):
        svc.location_stock(current_role=Role.MEDEWERKER, location_id=1)


def test_import_location_stock_adds_to_existing_levels():
    svc, inventory = _build()
    text = "\n".join(
        [
            "\ufeffSKU;Naam;Categorie;Voorraad;Eenheid;Min. Voorraad;EAN",
            "TL-25;Tegellijm;Lijmen;5;zak;25;",
            "KIT-1;Kit;Kitten;2,5;koker;3;",
            "ONBEKEND;Iets;;1;stuks;0;",
            ";Zonder SKU;;4;stuks;0;",
            "TL-25;Tegellijm",
        ]
    )

    result = svc.import_location_stock_csv(current_role=Role.ADMIN, location_id=2, text=text, separator=";")

    assert result.imported == 2
    assert result.skipped == ("Product niet gevonden: ONBEKEND",)
    assert inventory.stock[(1, 2)] == 7.0
    assert inventory.stock[(2, 2)] == 2.5
    # untouched location and no ledger rows
    assert inventory.stock[(1, 1)] == 10.0
    assert inventory.transactions == []


def test_import_location_stock_needs_data_rows():
    svc, _ = _build()
    with pytest.raises(ValidationError):
        svc.import_location_stock_csv(current_role=Role.ADMIN, location_id=1, text="SKU;Naam\n", separator=";")


def test_inventory_module_switched_off():
    svc, inventory = _build(SystemSettings(module_inventory=False))

    with pytest.raises(ValidationError) as exc:
        svc.book_out(user_id=3, project_id=1, lines=[{"product_id": 1, "location_id": 1, "quantity": 1}])
    assert str(exc.value) == "De voorraad module is uitgeschakeld"
    with pytest.raises(ValidationError):
        svc.receive(current_role=Role.ADMIN, user_id=1, product_id=1, location_id=1, quantity=1)
    assert inventory.transactions == []
    # reading stock stays possible
    assert len(svc.stock_overview()) == 3
