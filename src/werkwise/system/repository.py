from __future__ import annotations

from typing import Optional, Protocol

from .model import InvoiceSettings, SystemSettings


class SettingsRepository(Protocol):
    def get_system_settings(self) -> Optional[SystemSettings]:
        raise NotImplementedError

    def save_system_settings(self, settings: SystemSettings, *, updated_by: Optional[int]) -> None:
        raise NotImplementedError

    def get_invoice_settings(self) -> Optional[InvoiceSettings]:
        raise NotImplementedError

    def save_invoice_settings(self, settings: InvoiceSettings) -> None:
        raise NotImplementedError
