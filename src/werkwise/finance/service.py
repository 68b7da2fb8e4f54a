"""Revenue, cost and margin over a period.

Labour is valued per registered hour at the employee's sale rate (revenue) and
purchase rate (cost); material booked out to a project at the product's sale
and purchase price. A missing rate or price counts as 0.
"""
from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence

from ..core.enums import Role, TransactionType
from ..core.exceptions import AuthorizationError, ValidationError
from ..inventory.model import InventoryTransaction, Product
from ..inventory.repository import InventoryRepository
from ..projects.repository import ProjectRepository
from ..registrations.model import TimeRegistration
from ..registrations.repository import TimeRegistrationRepository
from ..system.service import SettingsService
from ..users.model import Profile
from ..users.permissions import has_permission
from ..users.repository import ProfileRepository

logger = logging.getLogger(__name__)

TIME_RANGES = ("1day", "7days", "1month", "quarter", "1year")
VIEW_MODES = ("total", "project", "employee")
MONTH_LABELS = ("Jan", "Feb", "Mrt", "Apr", "Mei", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dec")
TOP_ITEMS = 10
UNKNOWN = "Onbekend"


def js_round(value: float) -> int:
    """Half-up rounding (2.5 -> 3), unlike Python's round()."""
    return int(math.floor(value + 0.5))


def _shift_months(value: datetime, months: int) -> datetime:
    index = value.year * 12 + (value.month - 1) + months
    year, month = index // 12, index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def range_start(time_range: str, now: datetime) -> datetime:
    if time_range == "1day":
        return now - timedelta(days=1)
    if time_range == "7days":
        return now - timedelta(days=7)
    if time_range == "1month":
        return _shift_months(now, -1)
    if time_range == "quarter":
        return _shift_months(now, -3)
    if time_range == "1year":
        return _shift_months(now, -12)
    raise ValidationError("Ongeldige periode")


@dataclass
class _Totals:
    revenue: float = 0.0
    costs: float = 0.0

    def add(self, revenue: float, costs: float) -> None:
        self.revenue += revenue
        self.costs += costs

    def to_row(self, **label: Any) -> dict[str, Any]:
        return {
            **label,
            "revenue": js_round(self.revenue),
            "costs": js_round(self.costs),
            "profit": js_round(self.revenue - self.costs),
        }


def _month_key(value: date) -> str:
    return f"{value.year}-{value.month:02d}"


def _month_label(key: str) -> str:
    year, month = key.split("-")
    return f"{MONTH_LABELS[int(month) - 1]} '{year[2:]}"


class FinancialDashboardService:
    def __init__(
        self,
        *,
        registrations: TimeRegistrationRepository,
        inventory: InventoryRepository,
        profiles: ProfileRepository,
        projects: ProjectRepository,
        settings: SettingsService,
    ):
        self._registrations = registrations
        self._inventory = inventory
        self._profiles = profiles
        self._projects = projects
        self._settings = settings

    def _materials(self, since: datetime, until: datetime, project_id: Optional[int]) -> list[InventoryTransaction]:
        transactions = self._inventory.list_transactions(
            project_id=project_id, transaction_type=TransactionType.OUT, since=since
        )
        # moves between locations are out-transactions too, but carry no project
        return [
            t
            for t in transactions
            if t.project_id is not None and (t.created_at is None or t.created_at <= until)
        ]

    def overview(
        self,
        *,
        current_role: Role,
        time_range: str = "1month",
        view_mode: str = "total",
        project_id: Optional[int] = None,
        user_id: Optional[int] = None,
        now: datetime,
    ) -> dict[str, Any]:
        if not has_permission(current_role, "manage_settings"):
            raise AuthorizationError("Geen toegang")
        self._settings.require_module("module_financial_dashboard")
        if view_mode not in VIEW_MODES:
            raise ValidationError("Ongeldige weergave")

        start = range_start(time_range, now)
        project_filter = project_id if view_mode == "project" and project_id else None
        user_filter = user_id if view_mode == "employee" and user_id else None

        registrations = self._registrations.list_filtered(
            user_id=user_filter, project_id=project_filter, date_from=start.date(), date_to=now.date()
        )
        materials = self._materials(start, now, project_filter)
        profiles = {p.id: p for p in self._profiles.list_all()}
        products = {p.id: p for p in self._inventory.list_products()}
        projects = self._projects.list_all()

        labour, material = _Totals(), _Totals()
        hours = 0.0
        for reg in registrations:
            labour.add(*_labour_value(reg, profiles.get(reg.user_id)))
            hours += reg.aantal_uren or 0.0
        for tx in materials:
            material.add(*_material_value(tx, products.get(tx.product_id)))

        revenue = labour.revenue + material.revenue
        costs = labour.costs + material.costs
        profit = revenue - costs

        if view_mode == "employee":
            by_item = _by_employee(registrations, profiles)
        elif view_mode == "total" and project_id:
            by_item = []
        else:
            by_item = _by_project(registrations, materials, profiles, products, {p.id: p.naam for p in projects})

        logger.info(
            "Financial overview %s/%s: %s registration(s), %s material booking(s)",
            time_range,
            view_mode,
            len(registrations),
            len(materials),
        )
        return {
            "totalRevenue": round(revenue, 2),
            "totalCosts": round(costs, 2),
            "profit": round(profit, 2),
            "profitMargin": round(profit / revenue * 100, 2) if revenue > 0 else 0,
            "hoursWorked": hours,
            "projectCount": len(projects),
            "revenueByMonth": _by_month(registrations, materials, profiles, products),
            "revenueByItem": by_item[:TOP_ITEMS],
            "costBreakdown": [
                {"name": name, "value": round(value, 2)}
                for name, value in (("Personeel", labour.costs), ("Materiaal", material.costs))
                if value > 0
            ],
            "period": {"from": start.date().isoformat(), "to": now.date().isoformat()},
        }


def _labour_value(reg: TimeRegistration, profile: Optional[Profile]) -> tuple[float, float]:
    hours = reg.aantal_uren or 0.0
    sale = (profile.hourly_rate_sale if profile else None) or 0.0
    purchase = (profile.hourly_rate_purchase if profile else None) or 0.0
    return hours * sale, hours * purchase


def _material_value(tx: InventoryTransaction, product: Optional[Product]) -> tuple[float, float]:
    quantity = abs(tx.quantity or 0.0)
    sale = (product.sale_price if product else None) or 0.0
    purchase = (product.purchase_price if product else None) or 0.0
    return quantity * sale, quantity * purchase


def _by_month(
    registrations: Iterable[TimeRegistration],
    materials: Iterable[InventoryTransaction],
    profiles: dict[int, Profile],
    products: dict[int, Product],
) -> list[dict[str, Any]]:
    months: dict[str, _Totals] = {}
    for reg in registrations:
        months.setdefault(_month_key(reg.datum), _Totals()).add(*_labour_value(reg, profiles.get(reg.user_id)))
    for tx in materials:
        if tx.created_at is None:
            continue
        months.setdefault(_month_key(tx.created_at), _Totals()).add(*_material_value(tx, products.get(tx.product_id)))
    return [months[key].to_row(month=_month_label(key)) for key in sorted(months)]


def _by_project(
    registrations: Iterable[TimeRegistration],
    materials: Iterable[InventoryTransaction],
    profiles: dict[int, Profile],
    products: dict[int, Product],
    project_names: dict[int, str],
) -> list[dict[str, Any]]:
    per_project: dict[Optional[int], _Totals] = {}
    for reg in registrations:
        per_project.setdefault(reg.project_id, _Totals()).add(*_labour_value(reg, profiles.get(reg.user_id)))
    for tx in materials:
        per_project.setdefault(tx.project_id, _Totals()).add(*_material_value(tx, products.get(tx.product_id)))

    rows = [totals.to_row(name=project_names.get(pid) or UNKNOWN) for pid, totals in per_project.items()]
    return sorted(rows, key=lambda r: r["revenue"], reverse=True)


def _by_employee(registrations: Sequence[TimeRegistration], profiles: dict[int, Profile]) -> list[dict[str, Any]]:
    per_user: dict[int, _Totals] = {}
    for reg in registrations:
        per_user.setdefault(reg.user_id, _Totals()).add(*_labour_value(reg, profiles.get(reg.user_id)))

    rows = []
    for uid, totals in per_user.items():
        profile = profiles.get(uid)
        rows.append(totals.to_row(name=profile.naam if profile else UNKNOWN))
    return sorted(rows, key=lambda r: r["revenue"], reverse=True)
