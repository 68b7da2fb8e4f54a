from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_float, require_non_empty
from ..core.enums import Role, TransactionType
from ..core.exceptions import AuthorizationError, InsufficientStockError, NotFoundError, ValidationError
from ..projects.repository import ProjectRepository
from ..system.service import SettingsService
from ..users.permissions import has_permission
from .model import (
    BookingLine,
    ImportResult,
    InventoryTransaction,
    Location,
    NewTransaction,
    Product,
    StockItem,
)
from .repository import InventoryRepository

logger = logging.getLogger(__name__)

IMPORT_DEFAULT_NOTE = "Geïmporteerd via CSV"
IMPORT_COLUMNS = ("Datum", "Project", "Product SKU", "Aantal", "Locatie", "Opmerkingen")
# SKU, Naam, Categorie, Voorraad, ...: only the first and fourth column are read back.
STOCK_IMPORT_MIN_COLUMNS = 4


def _fmt_qty(value: float) -> str:
    return f"{value:g}"


def _price(value, field_name: str) -> Optional[float]:
    price = optional_float(value, field_name)
    if price is not None and price < 0:
        raise ValidationError(f"{field_name} mag niet negatief zijn")
    return price


def parse_booking_lines(raw_lines: Sequence[dict]) -> list[BookingLine]:
    """Keep lines that name a product; a product without a location is an error."""
    lines: list[BookingLine] = []
    for raw in raw_lines or []:
        if not raw.get("product_id"):
            continue
        if not raw.get("location_id"):
            raise ValidationError("Selecteer een locatie voor alle producten")
        quantity = optional_float(raw.get("quantity"), "Aantal") or 0
        if quantity < 1:
            raise ValidationError("Aantal moet minimaal 1 zijn")
        lines.append(
            BookingLine(product_id=int(raw["product_id"]), location_id=int(raw["location_id"]), quantity=quantity)
        )
    if not lines:
        raise ValidationError("Voeg minimaal 1 geldig product toe")
    return lines


class InventoryService:
    def __init__(self, inventory: InventoryRepository, projects: ProjectRepository, settings: SettingsService):
        self._inventory = inventory
        self._projects = projects
        self._settings = settings

    def _require_enabled(self) -> None:
        self._settings.require_module("module_inventory")

    def _require_manage(self, current_role: Role) -> None:
        if not has_permission(current_role, "manage_inventory"):
            raise AuthorizationError("Geen toegang")
        self._require_enabled()

    def _product(self, product_id: int) -> Product:
        product = self._inventory.get_product(int(product_id))
        if not product:
            raise NotFoundError("Product niet gevonden")
        return product

    def _location(self, location_id: int) -> Location:
        location = self._inventory.get_location(int(location_id))
        if not location:
            raise NotFoundError("Locatie niet gevonden")
        return location

    # Catalogue

    def list_products(self) -> Sequence[Product]:
        return self._inventory.list_products()

    def create_product(self, *, current_role: Role, data: dict) -> int:
        self._require_manage(current_role)
        name = require_non_empty(data.get("name"), "Productnaam")
        sku = str(data.get("sku") or "").strip() or None
        if sku and self._inventory.get_product_by_sku(sku):
            raise ValidationError("Er bestaat al een product met deze SKU")
        minimum = optional_float(data.get("minimum_stock"), "Minimum voorraad") or 0
        if minimum < 0:
            raise ValidationError("Minimum voorraad mag niet negatief zijn")
        return self._inventory.create_product(
            name=name,
            sku=sku,
            ean=str(data.get("ean") or "").strip() or None,
            category=str(data.get("category") or "").strip(),
            unit=str(data.get("unit") or "stuks").strip() or "stuks",
            minimum_stock=int(minimum),
            price=optional_float(data.get("price"), "Prijs"),
            supplier=str(data.get("supplier") or "").strip() or None,
            purchase_price=_price(data.get("purchase_price"), "Inkoopprijs"),
            sale_price=_price(data.get("sale_price"), "Verkoopprijs"),
        )

    def update_product(self, *, current_role: Role, product_id: int, data: dict) -> None:
        self._require_manage(current_role)
        self._product(product_id)
        changes = dict(data)
        if "name" in changes:
            changes["name"] = require_non_empty(changes["name"], "Productnaam")
        if "minimum_stock" in changes:
            minimum = optional_float(changes["minimum_stock"], "Minimum voorraad") or 0
            if minimum < 0:
                raise ValidationError("Minimum voorraad mag niet negatief zijn")
            changes["minimum_stock"] = int(minimum)
        if "price" in changes:
            changes["price"] = optional_float(changes["price"], "Prijs")
        if "purchase_price" in changes:
            changes["purchase_price"] = _price(changes["purchase_price"], "Inkoopprijs")
        if "sale_price" in changes:
            changes["sale_price"] = _price(changes["sale_price"], "Verkoopprijs")
        self._inventory.update_product(int(product_id), changes=changes)

    def delete_product(self, *, current_role: Role, product_id: int) -> None:
        self._require_manage(current_role)
        if not self._inventory.delete_product(int(product_id)):
            raise NotFoundError("Product niet gevonden")

    def list_locations(self) -> Sequence[Location]:
        return self._inventory.list_locations()

    def create_location(self, *, current_role: Role, data: dict) -> int:
        self._require_manage(current_role)
        name = require_non_empty(data.get("name"), "Locatienaam")
        loc_type = str(data.get("type") or "magazijn").strip()
        if loc_type not in {"magazijn", "bus"}:
            raise ValidationError("Locatietype moet 'magazijn' of 'bus' zijn")
        return self._inventory.create_location(
            name=name,
            type=loc_type,
            license_plate=str(data.get("license_plate") or "").strip() or None,
            description=str(data.get("description") or "").strip() or None,
        )

    # Stock

    def stock_overview(self, *, location_id: Optional[int] = None) -> Sequence[StockItem]:
        return self._inventory.list_stock(location_id=location_id)

    def low_stock(self) -> list[dict]:
        """Products whose total stock over all locations is below their minimum."""
        totals: dict[int, float] = {}
        for item in self._inventory.list_stock():
            totals[item.product.id] = totals.get(item.product.id, 0.0) + item.quantity

        out: list[dict] = []
        for product in self._inventory.list_products():
            total = totals.get(product.id, 0.0)
            if total < product.minimum_stock:
                out.append({"product": product.to_dict(), "total_stock": total, "minimum_stock": product.minimum_stock})
        return out

    def set_stock(self, *, current_role: Role, product_id: int, location_id: int, quantity) -> None:
        self._require_manage(current_role)
        self._product(product_id)
        self._location(location_id)
        qty = optional_float(quantity, "Aantal")
        if qty is None or qty < 0:
            raise ValidationError("Voorraad mag niet negatief zijn")
        self._inventory.set_stock(int(product_id), int(location_id), quantity=qty)

    def _check_available(self, product: Product, location: Location, requested: float) -> None:
        available = self._inventory.get_stock(product.id, location.id)
        if available < requested:
            raise InsufficientStockError(
                f'Er is geen voorraad van "{product.name}" op {location.name}. '
                f"Beschikbaar: {_fmt_qty(available)} {product.unit}, "
                f"Gevraagd: {_fmt_qty(requested)} {product.unit}"
            )

    def book_out(self, *, user_id: int, project_id, lines: Sequence[dict]) -> list[int]:
        """Book material out to a project. All lines are checked before anything is written."""
        self._require_enabled()
        if not project_id:
            raise ValidationError("Selecteer een project")
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError("Project niet gevonden")

        booking = parse_booking_lines(lines)

        # a product can appear on several lines for the same location
        requested: dict[tuple[int, int], float] = {}
        for line in booking:
            key = (line.product_id, line.location_id)
            requested[key] = requested.get(key, 0.0) + line.quantity
        for (product_id, location_id), quantity in requested.items():
            self._check_available(self._product(product_id), self._location(location_id), quantity)

        transactions = [
            NewTransaction(
                product_id=line.product_id,
                location_id=line.location_id,
                project_id=project.id,
                user_id=int(user_id),
                transaction_type=TransactionType.OUT,
                quantity=-abs(line.quantity),
                notes=f"Afgeboekt naar project {project.naam}",
            )
            for line in booking
        ]
        ids = self._inventory.record_transactions(transactions)
        logger.info("Booked %s line(s) out to project %s", len(ids), project.id)
        return ids

    def receive(
        self,
        *,
        current_role: Role,
        user_id: int,
        product_id: int,
        location_id: int,
        quantity,
        notes: Optional[str] = None,
    ) -> int:
        self._require_manage(current_role)
        product = self._product(product_id)
        location = self._location(location_id)
        qty = optional_float(quantity, "Aantal") or 0
        if qty <= 0:
            raise ValidationError("Aantal moet groter zijn dan 0")

        [tx_id] = self._inventory.record_transactions(
            [
                NewTransaction(
                    product_id=product.id,
                    location_id=location.id,
                    project_id=None,
                    user_id=int(user_id),
                    transaction_type=TransactionType.IN,
                    quantity=abs(qty),
                    notes=(notes or "").strip() or None,
                )
            ]
        )
        return tx_id

    def move_stock(
        self,
        *,
        current_role: Role,
        user_id: int,
        product_id: int,
        from_location_id: int,
        to_location_id: int,
        quantity,
    ) -> None:
        """Transfer stock between two locations as an out/in transaction pair."""
        self._require_manage(current_role)
        if int(from_location_id) == int(to_location_id):
            raise ValidationError("Kies twee verschillende locaties")
        product = self._product(product_id)
        source = self._location(from_location_id)
        target = self._location(to_location_id)
        qty = optional_float(quantity, "Aantal") or 0
        if qty <= 0:
            raise ValidationError("Aantal moet groter zijn dan 0")
        self._check_available(product, source, qty)

        self._inventory.record_transactions(
            [
                NewTransaction(
                    product_id=product.id,
                    location_id=source.id,
                    project_id=None,
                    user_id=int(user_id),
                    transaction_type=TransactionType.OUT,
                    quantity=-qty,
                    notes=f"Verplaatst naar {target.name}",
                ),
                NewTransaction(
                    product_id=product.id,
                    location_id=target.id,
                    project_id=None,
                    user_id=int(user_id),
                    transaction_type=TransactionType.IN,
                    quantity=qty,
                    notes=f"Verplaatst van {source.name}",
                ),
            ]
        )

    # Ledger views

    def project_materials(self, project_id: int) -> Sequence[InventoryTransaction]:
        return self._inventory.list_transactions(project_id=int(project_id))

    def list_bookings(self, *, project_id: Optional[int] = None) -> Sequence[InventoryTransaction]:
        return self._inventory.list_transactions(project_id=project_id, transaction_type=TransactionType.OUT)

    def inventory_items(self) -> list[dict]:
        """Flat rows (one per product and location) for the stock export."""
        return [
            {
                "naam": item.product.name,
                "barcode": item.product.ean or "",
                "categorie": item.product.category,
                "locatie": item.location.name,
                "voorraad": item.quantity,
                "minimumvoorraad": item.product.minimum_stock,
                "eenheid": item.product.unit,
                "prijs": item.product.price,
                "leverancier": item.product.supplier or "",
            }
            for item in self._inventory.list_stock()
        ]

    # CSV import

    def import_bookings_csv(self, *, text: str, separator: str, user_id: int) -> ImportResult:
        """Import book-out rows: Datum, Project, Product SKU, Aantal, Locatie, Opmerkingen.

        The first line is a header. Rows with too few columns or unknown references
        are skipped with a warning; the import fails only when nothing is usable.
        """
        self._require_enabled()
        lines = [line for line in (text or "").lstrip("\ufeff").splitlines() if line.strip()]
        if len(lines) < 2:
            raise ValidationError("Bestand is leeg of heeft geen data")

        transactions: list[NewTransaction] = []
        skipped: list[str] = []
        for line in lines[1:]:
            values = [v.strip().strip('"') for v in line.split(separator)]
            if len(values) < len(IMPORT_COLUMNS):
                continue

            _date_str, project_name, sku, quantity_str, location_name, notes = values[:6]

            project = self._projects.find_by_name_like(project_name)
            if not project:
                logger.warning("Project niet gevonden: %s", project_name)
                skipped.append(f"Project niet gevonden: {project_name}")
                continue

            product = self._inventory.get_product_by_sku(sku)
            if not product:
                logger.warning("Product niet gevonden: %s", sku)
                skipped.append(f"Product niet gevonden: {sku}")
                continue

            location = self._inventory.find_location_by_name(location_name)
            if not location:
                logger.warning("Locatie niet gevonden: %s", location_name)
                skipped.append(f"Locatie niet gevonden: {location_name}")
                continue

            try:
                quantity = float(quantity_str.replace(",", "."))
            except ValueError:
                logger.warning("Ongeldig aantal: %s", quantity_str)
                skipped.append(f"Ongeldig aantal: {quantity_str}")
                continue

            transactions.append(
                NewTransaction(
                    product_id=product.id,
                    location_id=location.id,
                    project_id=project.id,
                    user_id=int(user_id),
                    transaction_type=TransactionType.OUT,
                    quantity=-abs(quantity),
                    notes=notes or IMPORT_DEFAULT_NOTE,
                )
            )

        if not transactions:
            raise ValidationError("Geen geldige regels gevonden om te importeren")

        self._inventory.record_transactions(transactions)
        return ImportResult(imported=len(transactions), skipped=tuple(skipped))

    def location_stock(self, *, current_role: Role, location_id: int) -> tuple[Location, Sequence[StockItem]]:
        """Stock rows of one location, for the per-location export."""
        self._require_manage(current_role)
        location = self._location(location_id)
        items = self._inventory.list_stock(location_id=location.id)
        if not items:
            raise ValidationError("Geen voorraad op deze locatie om te exporteren")
        return location, items

    def import_location_stock_csv(
        self, *, current_role: Role, location_id: int, text: str, separator: str
    ) -> ImportResult:
        """Add the quantities of a per-location stock file to what the location already holds.

        Rows are matched on SKU (first column); the quantity is the fourth column.
        Rows without a SKU or quantity are ignored, unknown SKUs are reported.
        """
        self._require_manage(current_role)
        location = self._location(location_id)

        lines = [line for line in (text or "").lstrip("\ufeff").splitlines() if line.strip()]
        if len(lines) < 2:
            raise ValidationError("Bestand is leeg of heeft geen data")

        imported = 0
        skipped: list[str] = []
        for line in lines[1:]:
            values = [v.strip().strip('"') for v in line.split(separator)]
            if len(values) < STOCK_IMPORT_MIN_COLUMNS:
                continue
            sku, quantity_str = values[0], values[3]
            if not sku or not quantity_str:
                continue

            product = self._inventory.get_product_by_sku(sku)
            if not product:
                logger.warning("Product niet gevonden: %s", sku)
                skipped.append(f"Product niet gevonden: {sku}")
                continue
            try:
                quantity = float(quantity_str.replace(",", "."))
            except ValueError:
                logger.warning("Ongeldig aantal: %s", quantity_str)
                skipped.append(f"Ongeldig aantal: {quantity_str}")
                continue

            self._inventory.add_stock(product.id, location.id, quantity=quantity)
            imported += 1

        logger.info("Stock import for location %s: %s row(s), %s skipped", location.id, imported, len(skipped))
        return ImportResult(imported=imported, skipped=tuple(skipped))
