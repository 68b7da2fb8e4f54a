"""Demo data for a fresh install: users, projects, inventory and some history.

Each insert is attempted on its own; a failure is logged, recorded in the
result and seeding moves on.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import parse_iso_date
from ..core.enums import ProjectStatus, RegistrationStatus, Role, TransactionType
from ..inventory.model import NewTransaction
from ..inventory.repository import InventoryRepository
from ..projects.model import ProjectFields
from ..projects.repository import ProjectRepository
from ..registrations.model import NewRegistration
from ..registrations.repository import TimeRegistrationRepository
from ..users.repository import ProfileRepository

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "demowerkwise"

DEMO_USERS = (
    ("Jan de Vries", "jan.devries@werkwise.nl", Role.ADMIN),
    ("Sophie Bakker", "sophie.bakker@werkwise.nl", Role.KANTOORPERSONEEL),
    ("Pieter Jansen", "pieter.jansen@werkwise.nl", Role.MEDEWERKER),
    ("Emma Visser", "emma.visser@werkwise.nl", Role.MEDEWERKER),
    ("Thomas van der Berg", "thomas.vanderberg@werkwise.nl", Role.ZZPER),
)

DEMO_PROJECTS = (
    ("Nieuwbouw Villa Rotterdam", "Complete nieuwbouw van luxe villa met tuin", "Rotterdam, Zuid-Holland", "2024-09-01", ProjectStatus.ACTIEF),
    ("Renovatie Kantoorpand Amsterdam", "Volledige renovatie van 3-verdieping kantoorpand", "Amsterdam, Noord-Holland", "2024-10-15", ProjectStatus.ACTIEF),
    ("Dakvervanging School Utrecht", "Vervanging van dakbedekking inclusief isolatie", "Utrecht, Utrecht", "2024-11-01", ProjectStatus.ACTIEF),
    ("Badkamer Renovatie Den Haag", "Complete badkamer renovatie met vloerverwarming", "Den Haag, Zuid-Holland", "2024-08-01", ProjectStatus.VOLTOOID),
    ("Aanbouw Woning Leiden", "Aanbouw van serre en extra slaapkamer", "Leiden, Zuid-Holland", "2024-12-01", ProjectStatus.GEPAUZEERD),
)

# name, sku, category, unit, minimum stock, price, ean
DEMO_PRODUCTS = (
    ("Gipsplaat 12.5mm", "GP-125", "Bouwmaterialen", "stuks", 50, 8.50, "8712345678901"),
    ("Schroeven 4x40mm", "SCH-440", "Bevestigingsmaterialen", "doos", 100, 12.00, "8712345678902"),
    ("Isolatiemateriaal 100mm", "ISO-100", "Isolatie", "m2", 200, 15.00, "8712345678903"),
    ("PVC Buis 110mm", "PVC-110", "Leidingwerk", "meter", 30, 6.50, "8712345678904"),
    ("Betonmix 25kg", "BET-25", "Bouwmaterialen", "zak", 40, 4.50, "8712345678905"),
    ("Dakpan Rood", "DAK-R01", "Dakbedekking", "stuks", 500, 1.20, "8712345678906"),
    ("Elektriciteitskabel 2.5mm", "ELK-25", "Elektra", "meter", 500, 0.85, "8712345678907"),
    ("Waterpas 120cm", "WP-120", "Gereedschap", "stuks", 5, 45.00, "8712345678908"),
    ("Verfroller 25cm", "VR-25", "Verfbenodigdheden", "stuks", 20, 8.00, "8712345678909"),
    ("Houtlijm 750ml", "HL-750", "Lijmen", "fles", 15, 12.50, "8712345678910"),
    ("Tegellijm 25kg", "TL-25", "Lijmen", "zak", 25, 18.00, "8712345678911"),
    ("Voegmiddel Grijs", "VM-G01", "Voegmaterialen", "zak", 20, 8.00, "8712345678912"),
)

DEMO_LOCATIONS = (
    ("Hoofdmagazijn Rotterdam", "magazijn", None, "Centrale opslaglocatie"),
    ("Bus 01 - Jan", "bus", "AB-123-CD", "Bedrijfsbus Jan de Vries"),
    ("Bus 02 - Pieter", "bus", "EF-456-GH", "Bedrijfsbus Pieter Jansen"),
    ("Magazijn Amsterdam", "magazijn", None, "Noord-Holland opslaglocatie"),
)

WORK_TYPES = ("projectbasis", "meerwerk", "regie")
DESCRIPTIONS = (
    "Werkzaamheden uitgevoerd op locatie",
    "Extra werk na wijziging opdracht",
    "Reguliere werkzaamheden",
    "Afwerking en oplevering",
    "Voorbereiding materialen",
)
TRANSACTION_COUNT = 30


@dataclass
class SeedResult:
    success: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"success": list(self.success), "errors": list(self.errors)}


class DemoSeeder:
    def __init__(
        self,
        *,
        profiles: ProfileRepository,
        projects: ProjectRepository,
        inventory: InventoryRepository,
        registrations: TimeRegistrationRepository,
        rng: Optional[random.Random] = None,
    ):
        self._profiles = profiles
        self._projects = projects
        self._inventory = inventory
        self._registrations = registrations
        self._rng = rng or random.Random()

    def _seed_users(self, result: SeedResult) -> list[int]:
        ids = []
        for naam, email, role in DEMO_USERS:
            try:
                existing = self._profiles.get_by_email(email)
                if existing:
                    ids.append(existing.id)
                    result.success.append(f"User {naam} already exists")
                    continue
                ids.append(
                    self._profiles.create(
                        naam=naam,
                        email=email,
                        password_hash=generate_password_hash(DEMO_PASSWORD),
                        role=role,
                        hourly_rate_sale=float(self._rng.randint(45, 74)),
                        hourly_rate_purchase=float(self._rng.randint(25, 44)),
                    )
                )
                result.success.append(f"Created user: {naam}")
            except Exception as e:
                logger.warning("Seeding user %s failed: %s", naam, e)
                result.errors.append(f"Error creating user {naam}: {e}")
        return ids

    def _seed_projects(self, result: SeedResult) -> list[int]:
        ids = []
        for naam, beschrijving, locatie, start, status in DEMO_PROJECTS:
            try:
                ids.append(
                    self._projects.create(
                        ProjectFields(
                            naam=naam,
                            status=status,
                            project_nummer=None,
                            beschrijving=beschrijving,
                            locatie=locatie,
                            start_datum=parse_iso_date(start),
                            estimated_hours=None,
                            calculated_hours=None,
                            progress_percentage=100 if status == ProjectStatus.VOLTOOID else 0,
                            oppervlakte_m2=None,
                        )
                    )
                )
                result.success.append(f"Created project: {naam}")
            except Exception as e:
                logger.warning("Seeding project %s failed: %s", naam, e)
                result.errors.append(f"Error creating project {naam}: {e}")
        return ids

    def _seed_locations(self, result: SeedResult) -> list[int]:
        ids = []
        for name, type_, plate, description in DEMO_LOCATIONS:
            try:
                ids.append(
                    self._inventory.create_location(name=name, type=type_, license_plate=plate, description=description)
                )
                result.success.append(f"Created location: {name}")
            except Exception as e:
                logger.warning("Seeding location %s failed: %s", name, e)
                result.errors.append(f"Error creating location {name}: {e}")
        return ids

    def _seed_products(self, result: SeedResult) -> list[int]:
        ids = []
        for name, sku, category, unit, minimum, price, ean in DEMO_PRODUCTS:
            try:
                ids.append(
                    self._inventory.create_product(
                        name=name,
                        sku=sku,
                        ean=ean,
                        category=category,
                        unit=unit,
                        minimum_stock=minimum,
                        price=price,
                        purchase_price=round(price * 0.7, 2),
                        sale_price=round(price * 1.3, 2),
                        supplier=None,
                    )
                )
                result.success.append(f"Created product: {name}")
            except Exception as e:
                logger.warning("Seeding product %s failed: %s", name, e)
                result.errors.append(f"Error creating product {name}: {e}")
        return ids

    def _seed_stock(self, product_ids: list[int], location_ids: list[int], result: SeedResult) -> dict[tuple[int, int], int]:
        # Some levels land below the product minimum on purpose.
        levels = {}
        for product_id in product_ids:
            for location_id in location_ids:
                quantity = self._rng.randint(0, 99)
                try:
                    self._inventory.set_stock(product_id, location_id, quantity=quantity)
                    levels[(product_id, location_id)] = quantity
                except Exception as e:
                    result.errors.append(f"Error creating stock: {e}")
        result.success.append("Created inventory stock entries")
        return levels

    def _seed_registrations(self, user_ids: list[int], project_ids: list[int], today: date, result: SeedResult) -> None:
        for user_id in user_ids:
            for _ in range(self._rng.randint(5, 9)):
                try:
                    self._registrations.create_many(
                        [
                            NewRegistration(
                                user_id=user_id,
                                project_id=self._rng.choice(project_ids),
                                project_naam=None,
                                datum=today - timedelta(days=self._rng.randint(0, 30)),
                                werktype=self._rng.choice(WORK_TYPES),
                                aantal_uren=float(self._rng.randint(3, 8)),
                                werkomschrijving=self._rng.choice(DESCRIPTIONS),
                                driven_kilometers=0.0,
                                progress_percentage=None,
                                materials=(),
                                status=RegistrationStatus.APPROVED
                                if self._rng.random() > 0.2
                                else RegistrationStatus.SUBMITTED,
                            )
                        ]
                    )
                except Exception as e:
                    result.errors.append(f"Error creating time registration: {e}")
        result.success.append(f"Created time registrations for {len(user_ids)} users")

    def _seed_transactions(
        self,
        user_ids: list[int],
        project_ids: list[int],
        levels: dict[tuple[int, int], int],
        result: SeedResult,
    ) -> None:
        created = 0
        for _ in range(TRANSACTION_COUNT):
            key = self._rng.choice(sorted(levels))
            quantity = min(self._rng.randint(1, 10), levels[key])
            if quantity <= 0:
                continue
            product_id, location_id = key
            try:
                self._inventory.record_transactions(
                    [
                        NewTransaction(
                            product_id=product_id,
                            location_id=location_id,
                            transaction_type=TransactionType.OUT,
                            quantity=-quantity,
                            project_id=self._rng.choice(project_ids),
                            user_id=self._rng.choice(user_ids),
                            notes="Materiaal afgeboekt voor project",
                        )
                    ]
                )
                levels[key] -= quantity
                created += 1
            except Exception as e:
                result.errors.append(f"Error creating transaction: {e}")
        result.success.append(f"Created {created} inventory transactions")

    def run(self, *, today: date) -> SeedResult:
        logger.info("Starting demo data seeding")
        result = SeedResult()

        user_ids = self._seed_users(result)
        if not user_ids:
            result.errors.append("No user IDs available - cannot create related data")
            return result

        project_ids = self._seed_projects(result)
        location_ids = self._seed_locations(result)
        product_ids = self._seed_products(result)
        levels = self._seed_stock(product_ids, location_ids, result)

        if project_ids:
            self._seed_registrations(user_ids, project_ids, today, result)
            if levels:
                self._seed_transactions(user_ids, project_ids, levels, result)

        logger.info("Demo seeding finished: %s ok, %s errors", len(result.success), len(result.errors))
        return result
