from __future__ import annotations

import pytest

from fakes import InMemorySettings
from werkwise.core.enums import Role
from werkwise.core.exceptions import AuthorizationError, ValidationError
from werkwise.system.model import SystemSettings
from werkwise.system.service import SettingsService


def test_defaults_when_nothing_stored():
    svc = SettingsService(InMemorySettings())

    assert svc.csv_separator() == ";"
    assert svc.is_module_enabled("module_inventory")
    assert not svc.is_module_enabled("module_onbekend")
    assert svc.invoice_settings() is None


def test_stored_junk_separator_reads_back_as_semicolon():
    svc = SettingsService(InMemorySettings(system=SystemSettings(csv_separator="|")))
    assert svc.csv_separator() == ";"


def test_update_system_settings():
    repo = InMemorySettings()
    svc = SettingsService(repo)

    updated = svc.update_system_settings(
        current_role=Role.ADMIN, user_id=1, data={"csv_separator": ",", "module_invoicing": False}
    )
    assert updated.csv_separator == ","
    assert repo.system.module_invoicing is False
    assert svc.csv_separator() == ","

    with pytest.raises(ValidationError):
        svc.update_system_settings(current_role=Role.ADMIN, user_id=1, data={"csv_separator": "\t"})
    assert svc.csv_separator() == ","

    with pytest.raises(AuthorizationError):
        svc.update_system_settings(current_role=Role.KANTOORPERSONEEL, user_id=2, data={"csv_separator": ";"})


def test_update_invoice_settings():
    svc = SettingsService(InMemorySettings())

    settings = svc.update_invoice_settings(
        current_role=Role.ADMIN,
        data={"company_name": " Werkwise BV ", "payment_terms_days": "14", "iban": "  "},
    )
    assert settings.company_name == "Werkwise BV"
    assert settings.payment_terms_days == 14
    assert settings.invoice_prefix == "F"
    assert settings.iban is None

    with pytest.raises(ValidationError):
        svc.update_invoice_settings(current_role=Role.ADMIN, data={"company_name": "X", "payment_terms_days": "-1"})
