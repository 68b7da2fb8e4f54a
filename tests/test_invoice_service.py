from __future__ import annotations

import re
from datetime import date

import pytest

from fakes import InMemoryInventory, InMemoryProfiles, InMemoryProjects, InMemoryRegistrations, InMemorySettings
from werkwise.core.enums import ProjectStatus, RegistrationStatus, Role
from werkwise.core.exceptions import AuthorizationError, ValidationError
from werkwise.invoicing.service import InvoiceService, build_invoice, invoice_number
from werkwise.projects.model import Project
from werkwise.projects.service import ProjectService
from werkwise.registrations.model import TimeRegistration
from werkwise.system.model import InvoiceSettings, SystemSettings
from werkwise.system.service import SettingsService
from werkwise.users.model import Profile

PROJECT = Project(id=1, naam="Villa", status=ProjectStatus.ACTIEF, project_nummer="P-12")
SETTINGS = InvoiceSettings(
    company_name="Werkwise BV",
    invoice_prefix="WW",
    payment_terms_days=14,
    address_street="Industrieweg 1",
    address_zip="2841 AA",
    address_city="Moordrecht",
    website="www.werkwise.nl",
    iban="NL00BANK0123456789",
    invoice_footer="Bedankt voor de opdracht",
)
PROFILES = [
    Profile(id=3, naam="Pieter", email="pieter@werkwise.nl", password_hash="x", role=Role.MEDEWERKER, hourly_rate_sale=60),
    Profile(id=4, naam="Emma", email="emma@werkwise.nl", password_hash="x", role=Role.MEDEWERKER),
]


def _reg(rid: int, user_id: int, day: date, hours: float) -> TimeRegistration:
    return TimeRegistration(
        id=rid,
        user_id=user_id,
        project_id=1,
        project_naam="Villa",
        datum=day,
        werktype="projectbasis",
        aantal_uren=hours,
        werkomschrijving="Werk",
        status=RegistrationStatus.APPROVED,
    )


REGS = [
    _reg(1, 3, date(2025, 10, 14), 6),
    _reg(2, 4, date(2025, 10, 13), 2),
    _reg(3, 99, date(2025, 10, 15), 1),
]


def test_invoice_number_format(fixed_now):
    assert re.fullmatch(r"WW-2025-\d{4}", invoice_number("WW", fixed_now))


def test_build_invoice_totals_and_rates(fixed_now):
    invoice = build_invoice(PROJECT, REGS, {p.id: p for p in PROFILES}, SETTINGS, fixed_now)

    assert [(l.datum, l.naam, l.tarief, l.subtotaal) for l in invoice.lines] == [
        ("13-10-2025", "Emma", 50.0, 100.0),
        ("14-10-2025", "Pieter", 60, 360),
        ("15-10-2025", "Onbekend", 50.0, 50.0),
    ]
    assert invoice.totaal_uren == 9
    assert invoice.totaal_bedrag == pytest.approx(510.0)
    assert invoice.btw_bedrag == pytest.approx(107.1)
    assert invoice.totaal_incl_btw == pytest.approx(617.1)
    assert invoice.factuur_datum == "15-10-2025"
    assert invoice.vervaldatum == "29-10-2025"
    assert invoice.filename == f"Factuur-{invoice.factuur_nummer}-Villa.pdf"


def test_build_invoice_needs_settings_and_hours(fixed_now):
    with pytest.raises(ValidationError) as exc:
        build_invoice(PROJECT, REGS, {}, None, fixed_now)
    assert str(exc.value) == "Geen factuur instellingen gevonden"

    with pytest.raises(ValidationError) as exc:
        build_invoice(PROJECT, [], {}, SETTINGS, fixed_now)
    assert str(exc.value) == "Geen urenregistraties gevonden voor dit project"


def _service(system=None):
    projects = InMemoryProjects([PROJECT])
    registrations = InMemoryRegistrations(REGS)
    settings = SettingsService(InMemorySettings(system=system, invoice=SETTINGS))
    return InvoiceService(
        projects=ProjectService(projects, registrations, InMemoryInventory()),
        registrations=registrations,
        profiles=InMemoryProfiles(PROFILES),
        settings=settings,
    )


def test_invoice_service_permissions_and_module_switch(fixed_now):
    with pytest.raises(AuthorizationError):
        _service().build(1, current_role=Role.MEDEWERKER, now=fixed_now)

    with pytest.raises(ValidationError) as exc:
        _service(SystemSettings(module_invoicing=False)).build(1, current_role=Role.ADMIN, now=fixed_now)
    assert str(exc.value) == "De facturatie module is uitgeschakeld"


def test_generate_pdf(fixed_now):
    invoice, pdf = _service().generate_pdf(1, current_role=Role.KANTOORPERSONEEL, now=fixed_now)

    assert invoice.totaal_uren == 9
    assert pdf.startswith(b"%PDF")
