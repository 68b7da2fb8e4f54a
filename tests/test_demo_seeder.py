from __future__ import annotations

import random
from datetime import date

from fakes import InMemoryInventory, InMemoryProfiles, InMemoryProjects, InMemoryRegistrations
from werkwise.core.enums import Role
from werkwise.seeding.demo import DEMO_LOCATIONS, DEMO_PRODUCTS, DEMO_PROJECTS, DEMO_USERS, DemoSeeder
from werkwise.users.model import Profile


def _seeder(profiles=None):
    profiles = profiles or InMemoryProfiles()
    projects = InMemoryProjects()
    inventory = InMemoryInventory()
    registrations = InMemoryRegistrations()
    seeder = DemoSeeder(
        profiles=profiles,
        projects=projects,
        inventory=inventory,
        registrations=registrations,
        rng=random.Random(42),
    )
    return seeder, profiles, projects, inventory, registrations


def test_seeds_everything_without_errors():
    seeder, profiles, projects, inventory, registrations = _seeder()

    result = seeder.run(today=date(2025, 10, 15))

    assert result.errors == []
    assert len(profiles.by_id) == len(DEMO_USERS)
    assert len(projects.by_id) == len(DEMO_PROJECTS)
    assert len(inventory.locations) == len(DEMO_LOCATIONS)
    assert len(inventory.products) == len(DEMO_PRODUCTS)
    assert len(inventory.stock) == len(DEMO_LOCATIONS) * len(DEMO_PRODUCTS)
    assert all(p.sale_price > p.purchase_price for p in inventory.products.values())
    assert all(p.hourly_rate_purchase < p.hourly_rate_sale for p in profiles.by_id.values())

    per_user = {}
    for reg in registrations.by_id.values():
        per_user[reg.user_id] = per_user.get(reg.user_id, 0) + 1
        assert 3 <= reg.aantal_uren <= 8
        assert (date(2025, 10, 15) - reg.datum).days <= 30
    assert all(5 <= n <= 9 for n in per_user.values())


def test_stock_never_goes_negative():
    seeder, _, _, inventory, _ = _seeder()

    seeder.run(today=date(2025, 10, 15))

    assert inventory.transactions
    assert all(t.quantity < 0 for t in inventory.transactions)
    assert min(inventory.stock.values()) >= 0


def test_existing_users_are_reused():
    existing = InMemoryProfiles(
        [Profile(id=7, naam="Jan de Vries", email="jan.devries@werkwise.nl", password_hash="x", role=Role.ADMIN)]
    )
    seeder, profiles, *_ = _seeder(existing)

    result = seeder.run(today=date(2025, 10, 15))

    assert "User Jan de Vries already exists" in result.success
    assert len(profiles.by_id) == len(DEMO_USERS)
