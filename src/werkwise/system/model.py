from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

from ..core.constants import ALLOWED_CSV_SEPARATORS, DEFAULT_CSV_SEPARATOR

MODULE_FLAGS = (
    "module_invoicing",
    "module_hourly_rates",
    "module_damage_reports",
    "module_inventory",
    "module_notifications",
    "module_email_notifications",
    "module_time_registration",
    "module_special_tools",
    "module_financial_dashboard",
)


def normalize_separator(value: Optional[str]) -> str:
    return value if value in ALLOWED_CSV_SEPARATORS else DEFAULT_CSV_SEPARATOR


@dataclass(frozen=True)
class SystemSettings:
    """Feature switches plus export preferences. Every module defaults to enabled."""

    module_invoicing: bool = True
    module_hourly_rates: bool = True
    module_damage_reports: bool = True
    module_inventory: bool = True
    module_notifications: bool = True
    module_email_notifications: bool = True
    module_time_registration: bool = True
    module_special_tools: bool = True
    module_financial_dashboard: bool = True
    csv_separator: str = DEFAULT_CSV_SEPARATOR

    def is_enabled(self, module: str) -> bool:
        return bool(getattr(self, module, False)) if module in MODULE_FLAGS else False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InvoiceSettings:
    company_name: str
    invoice_prefix: str = "F"
    payment_terms_days: int = 30
    address_street: Optional[str] = None
    address_zip: Optional[str] = None
    address_city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    kvk_number: Optional[str] = None
    btw_number: Optional[str] = None
    iban: Optional[str] = None
    invoice_footer: Optional[str] = None
    logo_path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
