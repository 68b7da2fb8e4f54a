from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..common.validators import require_non_empty
from ..core.constants import ALLOWED_CSV_SEPARATORS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.permissions import has_permission
from .model import MODULE_FLAGS, InvoiceSettings, SystemSettings, normalize_separator
from .repository import SettingsRepository

_DISABLED_MESSAGES = {
    "module_invoicing": "De facturatie module is uitgeschakeld",
    "module_hourly_rates": "De uurtarieven module is uitgeschakeld",
    "module_damage_reports": "De schademeldingen module is uitgeschakeld",
    "module_inventory": "De voorraad module is uitgeschakeld",
    "module_email_notifications": "De e-mail notificaties module is uitgeschakeld",
    "module_time_registration": "De urenregistratie module is uitgeschakeld",
    "module_financial_dashboard": "Het financieel dashboard is uitgeschakeld",
}


class SettingsService:
    """Runtime business settings stored in the database."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def system_settings(self) -> SystemSettings:
        return self._settings.get_system_settings() or SystemSettings()

    def is_module_enabled(self, module: str) -> bool:
        return self.system_settings().is_enabled(module)

    def require_module(self, module: str) -> None:
        if not self.is_module_enabled(module):
            raise ValidationError(_DISABLED_MESSAGES.get(module, "Deze module is uitgeschakeld"))

    def csv_separator(self) -> str:
        return normalize_separator(self.system_settings().csv_separator)

    def update_system_settings(self, *, current_role: Role, user_id: int, data: dict) -> SystemSettings:
        if not has_permission(current_role, "manage_settings"):
            raise AuthorizationError("Geen toegang")

        current = self.system_settings()
        changes: dict = {}
        for name in MODULE_FLAGS:
            if name in data:
                changes[name] = bool(data[name])
        if "csv_separator" in data:
            if data["csv_separator"] not in ALLOWED_CSV_SEPARATORS:
                raise ValidationError("Scheidingsteken moet ',' of ';' zijn")
            changes["csv_separator"] = data["csv_separator"]

        updated = replace(current, **changes)
        self._settings.save_system_settings(updated, updated_by=int(user_id))
        return updated

    def invoice_settings(self) -> Optional[InvoiceSettings]:
        return self._settings.get_invoice_settings()

    def update_invoice_settings(self, *, current_role: Role, data: dict) -> InvoiceSettings:
        if not has_permission(current_role, "manage_settings"):
            raise AuthorizationError("Geen toegang")

        try:
            terms = int(data.get("payment_terms_days") or 30)
        except (TypeError, ValueError):
            raise ValidationError("Betalingstermijn moet een getal zijn")
        if terms < 0:
            raise ValidationError("Betalingstermijn mag niet negatief zijn")

        def _text(key: str) -> Optional[str]:
            value = str(data.get(key) or "").strip()
            return value or None

        settings = InvoiceSettings(
            company_name=require_non_empty(data.get("company_name"), "Bedrijfsnaam"),
            invoice_prefix=_text("invoice_prefix") or "F",
            payment_terms_days=terms,
            address_street=_text("address_street"),
            address_zip=_text("address_zip"),
            address_city=_text("address_city"),
            phone=_text("phone"),
            email=_text("email"),
            website=_text("website"),
            kvk_number=_text("kvk_number"),
            btw_number=_text("btw_number"),
            iban=_text("iban"),
            invoice_footer=_text("invoice_footer"),
            logo_path=_text("logo_path"),
        )
        self._settings.save_invoice_settings(settings)
        return settings
