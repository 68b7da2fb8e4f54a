from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import as_date
from ..core.enums import OFFICE_ROLES, DamageItemType, DamageStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..system.service import SettingsService
from ..users.permissions import has_permission
from .model import DamageReport, DamageReportFields
from .repository import DamageReportRepository

logger = logging.getLogger(__name__)


def can_manage_all(role: Role) -> bool:
    """Office staff see, edit and resolve every report; everyone else only sees their own."""
    return has_permission(role, "manage_damage_reports") and Role(role) in OFFICE_ROLES


def parse_report_fields(data: dict) -> DamageReportFields:
    naam = str(data.get("naam") or "").strip()
    schade = str(data.get("beschrijving_schade") or "").strip()
    if not data.get("type_item") or not naam or not schade or not data.get("datum"):
        raise ValidationError("Vul alle verplichte velden in")
    try:
        type_item = DamageItemType(data["type_item"])
    except ValueError:
        raise ValidationError("Ongeldig type")
    try:
        datum = as_date(data["datum"])
    except ValueError:
        raise ValidationError("Ongeldige datum (YYYY-MM-DD)")

    photos = data.get("foto_urls") or []
    if not isinstance(photos, list):
        raise ValidationError("Foto's moeten een lijst met URL's zijn")

    return DamageReportFields(
        type_item=type_item,
        naam=naam,
        beschrijving=str(data.get("beschrijving") or "").strip() or naam,
        beschrijving_schade=schade,
        datum=datum,
        foto_urls=tuple(str(url) for url in photos if url),
    )


class DamageReportService:
    def __init__(self, reports: DamageReportRepository, settings: SettingsService):
        self._reports = reports
        self._settings = settings

    def _require_enabled(self) -> None:
        self._settings.require_module("module_damage_reports")

    def _require_manage_all(self, current_role: Role) -> None:
        if not can_manage_all(current_role):
            raise AuthorizationError("Geen toegang")

    def _report(self, report_id: int) -> DamageReport:
        report = self._reports.get_by_id(int(report_id))
        if not report:
            raise NotFoundError("Schademelding niet gevonden")
        return report

    def list_reports(
        self, *, current_user_id: int, current_role: Role, archived: bool = False
    ) -> Sequence[DamageReport]:
        """Open reports, or the resolved ones (the archive) when `archived` is set."""
        if not has_permission(current_role, "view_damage_reports"):
            raise AuthorizationError("Geen toegang")
        self._require_enabled()
        created_by: Optional[int] = None if can_manage_all(current_role) else int(current_user_id)
        reports = self._reports.list_reports(created_by=created_by)
        return [r for r in reports if (r.status == DamageStatus.OPGELOST) == archived]

    def create_report(self, *, current_user_id: int, current_role: Role, data: dict) -> int:
        if not has_permission(current_role, "manage_damage_reports"):
            raise AuthorizationError("Geen toegang")
        self._require_enabled()
        fields = parse_report_fields(data)
        report_id = self._reports.create(fields, created_by=int(current_user_id))
        logger.info("Damage report %s (%s) created by user %s", report_id, fields.type_item.value, current_user_id)
        return report_id

    def update_report(self, report_id: int, *, current_role: Role, data: dict) -> None:
        self._require_manage_all(current_role)
        self._require_enabled()
        report = self._report(report_id)
        self._reports.update(report.id, parse_report_fields(data))

    def set_status(self, report_id: int, *, current_role: Role, status) -> None:
        self._require_manage_all(current_role)
        self._require_enabled()
        try:
            new_status = DamageStatus(status)
        except ValueError:
            raise ValidationError("Ongeldige status")
        report = self._report(report_id)
        self._reports.set_status(report.id, new_status)

    def delete_report(self, report_id: int, *, current_role: Role) -> None:
        self._require_manage_all(current_role)
        self._require_enabled()
        if not self._reports.delete_by_id(int(report_id)):
            raise NotFoundError("Schademelding niet gevonden")
