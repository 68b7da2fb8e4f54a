"""Invoices for project hours, billed at each employee's sale rate."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import format_nl_date
from ..core.constants import DEFAULT_HOURLY_RATE_SALE, VAT_RATE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..projects.model import Project
from ..projects.service import ProjectService
from ..registrations.model import TimeRegistration
from ..registrations.repository import TimeRegistrationRepository
from ..system.model import InvoiceSettings
from ..system.service import SettingsService
from ..users.model import Profile
from ..users.permissions import has_permission
from ..users.repository import ProfileRepository
from .model import Invoice, InvoiceLine
from .pdf import render_invoice_pdf

logger = logging.getLogger(__name__)


def invoice_number(prefix: str, now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    return f"{prefix}-{now.year}-{str(millis)[-4:]}"


def build_invoice(
    project: Project,
    registrations: Sequence[TimeRegistration],
    profiles: Mapping[int, Profile],
    settings: Optional[InvoiceSettings],
    now: datetime,
) -> Invoice:
    if settings is None:
        raise ValidationError("Geen factuur instellingen gevonden")
    if not registrations:
        raise ValidationError("Geen urenregistraties gevonden voor dit project")

    lines = []
    for reg in sorted(registrations, key=lambda r: r.datum):
        profile = profiles.get(reg.user_id)
        tarief = (profile.hourly_rate_sale if profile else None) or DEFAULT_HOURLY_RATE_SALE
        lines.append(
            InvoiceLine(
                datum=format_nl_date(reg.datum),
                naam=profile.naam if profile else "Onbekend",
                uren=reg.aantal_uren,
                tarief=tarief,
                subtotaal=reg.aantal_uren * tarief,
            )
        )

    totaal_uren = sum(line.uren for line in lines)
    totaal_bedrag = sum(line.subtotaal for line in lines)
    btw_bedrag = totaal_bedrag * VAT_RATE

    return Invoice(
        project_naam=project.naam,
        project_nummer=project.project_nummer,
        factuur_nummer=invoice_number(settings.invoice_prefix, now),
        factuur_datum=format_nl_date(now),
        vervaldatum=format_nl_date(now + timedelta(days=settings.payment_terms_days)),
        lines=tuple(lines),
        totaal_uren=totaal_uren,
        totaal_bedrag=totaal_bedrag,
        btw_bedrag=btw_bedrag,
        totaal_incl_btw=totaal_bedrag + btw_bedrag,
    )


class InvoiceService:
    def __init__(
        self,
        *,
        projects: ProjectService,
        registrations: TimeRegistrationRepository,
        profiles: ProfileRepository,
        settings: SettingsService,
    ):
        self._projects = projects
        self._registrations = registrations
        self._profiles = profiles
        self._settings = settings

    def build(self, project_id: int, *, current_role: Role, now: datetime) -> Invoice:
        if not has_permission(current_role, "export_data"):
            raise AuthorizationError("Geen toegang")
        self._settings.require_module("module_invoicing")

        project = self._projects.get_project(project_id)
        registrations = self._registrations.list_filtered(project_id=project.id)
        user_ids = {r.user_id for r in registrations}
        profiles = {p.id: p for p in self._profiles.list_by_ids(user_ids)} if user_ids else {}
        return build_invoice(project, registrations, profiles, self._settings.invoice_settings(), now)

    def generate_pdf(self, project_id: int, *, current_role: Role, now: datetime) -> tuple[Invoice, bytes]:
        invoice = self.build(project_id, current_role=current_role, now=now)
        pdf = render_invoice_pdf(invoice, self._settings.invoice_settings())
        logger.info("Generated invoice %s for project %s", invoice.factuur_nummer, project_id)
        return invoice, pdf
