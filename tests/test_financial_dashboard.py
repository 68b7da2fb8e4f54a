from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import InMemoryInventory, InMemoryProfiles, InMemoryProjects, InMemoryRegistrations, InMemorySettings
from werkwise.core.enums import ProjectStatus, RegistrationStatus, Role, TransactionType
from werkwise.core.exceptions import AuthorizationError, ValidationError
from werkwise.finance.service import FinancialDashboardService, js_round, range_start
from werkwise.inventory.model import InventoryTransaction, Location, Product
from werkwise.projects.model import Project
from werkwise.registrations.model import TimeRegistration
from werkwise.system.model import SystemSettings
from werkwise.system.service import SettingsService
from werkwise.users.model import Profile


def _reg(reg_id, user_id, project_id, datum, hours):
    return TimeRegistration(
        id=reg_id, user_id=user_id, project_id=project_id, project_naam=None, datum=datum,
        werktype="projectbasis", aantal_uren=hours, werkomschrijving="Werk", status=RegistrationStatus.SUBMITTED,
    )


def _tx(tx_id, transaction_type, quantity, project_id, created_at):
    return InventoryTransaction(
        id=tx_id, product_id=1, location_id=1, transaction_type=transaction_type,
        quantity=quantity, project_id=project_id, created_at=created_at,
    )


def _build(system: SystemSettings = None):
    profiles = InMemoryProfiles(
        [
            Profile(id=1, naam="Jan", email="jan@werkwise.nl", password_hash="x", role=Role.ADMIN),
            Profile(
                id=3, naam="Pieter", email="pieter@werkwise.nl", password_hash="x", role=Role.MEDEWERKER,
                hourly_rate_sale=50, hourly_rate_purchase=30,
            ),
            Profile(
                id=4, naam="Emma", email="emma@werkwise.nl", password_hash="x", role=Role.ZZPER,
                hourly_rate_sale=40, hourly_rate_purchase=25,
            ),
        ]
    )
    projects = InMemoryProjects(
        [
            Project(id=1, naam="Villa", status=ProjectStatus.ACTIEF),
            Project(id=2, naam="Kantoor", status=ProjectStatus.ACTIEF),
        ]
    )
    registrations = InMemoryRegistrations(
        [
            _reg(1, 3, 1, date(2025, 10, 14), 8),
            _reg(2, 4, 2, date(2025, 9, 20), 4),
            # before the one-month window
            _reg(3, 3, 1, date(2025, 8, 1), 10),
        ]
    )
    inventory = InMemoryInventory(
        [Product(id=1, name="Kit", category="Afdichting", unit="koker", purchase_price=10, sale_price=15)],
        [Location(id=1, name="Magazijn")],
    )
    inventory.transactions.extend(
        [
            _tx(1, TransactionType.OUT, -4, 1, datetime(2025, 10, 1, 8, 0)),
            # move between locations, no project
            _tx(2, TransactionType.OUT, -2, None, datetime(2025, 10, 2, 8, 0)),
            _tx(3, TransactionType.IN, 10, 1, datetime(2025, 10, 3, 8, 0)),
        ]
    )
    return FinancialDashboardService(
        registrations=registrations,
        inventory=inventory,
        profiles=profiles,
        projects=projects,
        settings=SettingsService(InMemorySettings(system)),
    )


def test_total_overview(fixed_now):
    svc = _build()

    data = svc.overview(current_role=Role.ADMIN, now=fixed_now)

    assert data["totalRevenue"] == 620
    assert data["totalCosts"] == 380
    assert data["profit"] == 240
    assert data["profitMargin"] == 38.71
    assert data["hoursWorked"] == 12
    assert data["projectCount"] == 2
    assert data["period"] == {"from": "2025-09-15", "to": "2025-10-15"}
    assert data["revenueByMonth"] == [
        {"month": "Sep '25", "revenue": 160, "costs": 100, "profit": 60},
        {"month": "Okt '25", "revenue": 460, "costs": 280, "profit": 180},
    ]
    assert data["revenueByItem"] == [
        {"name": "Villa", "revenue": 460, "costs": 280, "profit": 180},
        {"name": "Kantoor", "revenue": 160, "costs": 100, "profit": 60},
    ]
    assert data["costBreakdown"] == [{"name": "Personeel", "value": 340}, {"name": "Materiaal", "value": 40}]


def test_project_view_filters_on_project(fixed_now):
    svc = _build()

    data = svc.overview(current_role=Role.ADMIN, view_mode="project", project_id=1, now=fixed_now)

    assert data["totalRevenue"] == 460
    assert data["hoursWorked"] == 8
    assert [row["name"] for row in data["revenueByItem"]] == ["Villa"]


def test_total_view_ignores_project_filter(fixed_now):
    svc = _build()

    data = svc.overview(current_role=Role.ADMIN, view_mode="total", project_id=1, now=fixed_now)

    assert data["totalRevenue"] == 620
    assert data["revenueByItem"] == []


def test_employee_view(fixed_now):
    svc = _build()

    data = svc.overview(current_role=Role.ADMIN, view_mode="employee", now=fixed_now)
    assert data["revenueByItem"] == [
        {"name": "Pieter", "revenue": 400, "costs": 240, "profit": 160},
        {"name": "Emma", "revenue": 160, "costs": 100, "profit": 60},
    ]

    data = svc.overview(current_role=Role.ADMIN, view_mode="employee", user_id=4, now=fixed_now)
    assert [row["name"] for row in data["revenueByItem"]] == ["Emma"]
    assert data["hoursWorked"] == 4


def test_longer_range_includes_older_work(fixed_now):
    svc = _build()

    data = svc.overview(current_role=Role.ADMIN, time_range="quarter", now=fixed_now)

    assert data["hoursWorked"] == 22
    assert data["period"]["from"] == "2025-07-15"


def test_overview_needs_settings_permission(fixed_now):
    svc = _build()

    with pytest.raises(AuthorizationError):
        svc.overview(current_role=Role.KANTOORPERSONEEL, now=fixed_now)


def test_overview_refused_when_switched_off(fixed_now):
    svc = _build(SystemSettings(module_financial_dashboard=False))

    with pytest.raises(ValidationError) as exc:
        svc.overview(current_role=Role.ADMIN, now=fixed_now)
    assert str(exc.value) == "Het financieel dashboard is uitgeschakeld"


@pytest.mark.parametrize(
    "time_range, view_mode, message",
    [("2weeks", "total", "Ongeldige periode"), ("1month", "supplier", "Ongeldige weergave")],
)
def test_overview_rejects_unknown_range_and_view(fixed_now, time_range, view_mode, message):
    svc = _build()

    with pytest.raises(ValidationError) as exc:
        svc.overview(current_role=Role.ADMIN, time_range=time_range, view_mode=view_mode, now=fixed_now)
    assert str(exc.value) == message


def test_range_start_clamps_to_month_end():
    assert range_start("1month", datetime(2025, 3, 31, 9, 0)) == datetime(2025, 2, 28, 9, 0)
    assert range_start("1year", datetime(2024, 2, 29, 9, 0)) == datetime(2023, 2, 28, 9, 0)
    assert range_start("7days", datetime(2025, 10, 15, 9, 0)) == datetime(2025, 10, 8, 9, 0)


def test_js_round_rounds_half_up():
    assert js_round(2.5) == 3
    assert js_round(2.4) == 2
