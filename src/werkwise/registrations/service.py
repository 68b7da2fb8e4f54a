from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import as_date, format_nl_date
from ..common.validators import optional_float, require_range
from ..core.constants import MAX_HOURS_PER_DAY
from ..core.enums import NotificationType, RegistrationStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..projects.repository import ProjectRepository
from ..projects.service import ProjectService
from ..system.service import SettingsService
from ..users.permissions import has_permission
from ..users.repository import ProfileRepository
from .model import MaterialLine, NewRegistration, TimeRegistration, WorkLine
from .repository import TimeRegistrationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserHours:
    user_id: int
    naam: str
    hours: float

    def to_dict(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "naam": self.naam, "hours": self.hours}


def hours_per_user(registrations: Sequence[TimeRegistration]) -> list[UserHours]:
    totals: dict[int, float] = {}
    names: dict[int, str] = {}
    for reg in registrations:
        totals[reg.user_id] = totals.get(reg.user_id, 0.0) + reg.aantal_uren
        names.setdefault(reg.user_id, reg.user_naam or "Onbekend")
    return [UserHours(user_id=uid, naam=names[uid], hours=hours) for uid, hours in totals.items()]


def parse_work_lines(raw_lines: Sequence[dict]) -> list[WorkLine]:
    """Validate submitted work lines; messages point at the 1-based line number."""
    if not raw_lines:
        raise ValidationError("Voeg minimaal 1 werkregel toe")

    lines: list[WorkLine] = []
    for index, raw in enumerate(raw_lines, start=1):
        werktype = str(raw.get("werktype") or "").strip()
        omschrijving = str(raw.get("werkomschrijving") or "").strip()
        hours = optional_float(raw.get("aantal_uren"), f"Aantal uren (werkregel {index})")

        if not werktype or not omschrijving or not hours:
            raise ValidationError(f"Vul alle velden in voor werkregel {index}")
        if hours <= 0:
            raise ValidationError(f"Aantal uren moet groter zijn dan 0 voor werkregel {index}")
        if hours > MAX_HOURS_PER_DAY:
            raise ValidationError(f"Aantal uren kan niet meer dan 24 zijn voor werkregel {index}")

        materials = tuple(MaterialLine.from_dict(m) for m in (raw.get("materials") or []) if isinstance(m, dict))
        lines.append(WorkLine(werktype=werktype, werkomschrijving=omschrijving, aantal_uren=hours, materials=materials))

    if sum(line.aantal_uren for line in lines) > MAX_HOURS_PER_DAY:
        raise ValidationError("Totaal aantal uren kan niet meer dan 24 uur per dag zijn")
    return lines


def _parse_progress(value) -> Optional[int]:
    progress = optional_float(value, "Voortgang")
    if progress is None:
        return None
    return int(require_range(int(progress), "Voortgang", minimum=0, maximum=100))


class RegistrationService:
    def __init__(
        self,
        registrations: TimeRegistrationRepository,
        projects: ProjectRepository,
        project_service: ProjectService,
        profiles: ProfileRepository,
        notifications: NotificationService,
        settings: SettingsService,
    ):
        self._registrations = registrations
        self._projects = projects
        self._project_service = project_service
        self._profiles = profiles
        self._notifications = notifications
        self._settings = settings

    def submit(
        self,
        *,
        user_id: int,
        datum,
        project_id,
        work_lines: Sequence[dict],
        kilometers=None,
        progress=None,
        now: datetime,
    ) -> list[int]:
        """Store one `submitted` registration per work line and notify the office."""
        self._settings.require_module("module_time_registration")
        if not datum:
            raise ValidationError("Datum is verplicht")
        try:
            work_date = as_date(datum)
        except ValueError:
            raise ValidationError("Ongeldige datum (YYYY-MM-DD)")

        if not project_id:
            raise ValidationError("Selecteer een project")
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError("Project niet gevonden")

        lines = parse_work_lines(work_lines)
        km = optional_float(kilometers, "Kilometers") or 0.0
        progress_pct = _parse_progress(progress)

        new_regs = [
            NewRegistration(
                user_id=int(user_id),
                project_id=project.id,
                project_naam=project.naam,
                datum=work_date,
                werktype=line.werktype,
                aantal_uren=line.aantal_uren,
                werkomschrijving=line.werkomschrijving,
                driven_kilometers=km,
                progress_percentage=progress_pct,
                materials=line.materials,
                status=RegistrationStatus.SUBMITTED,
            )
            for line in lines
        ]
        ids = self._registrations.create_many(new_regs)

        self._project_service.raise_progress(project.id, progress_pct)
        self._profiles.touch_activity(int(user_id), at=now)
        self._notify_office(user_id=int(user_id), registrations=list(zip(ids, new_regs)))
        return ids

    def _notify_office(self, *, user_id: int, registrations: list[tuple[int, NewRegistration]]) -> None:
        submitter = self._profiles.get_by_id(user_id)
        naam = submitter.naam if submitter else "Onbekend"
        for registration_id, reg in registrations:
            try:
                self._notifications.notify_office(
                    type=NotificationType.TIME_REGISTRATION_SUBMITTED,
                    title=f"Nieuwe urenregistratie van {naam}",
                    message=(
                        f"Medewerker {naam} heeft op {format_nl_date(reg.datum)} {reg.aantal_uren:g} uur "
                        f"geregistreerd voor {reg.project_naam or 'een project'}. Werktype: {reg.werktype}. "
                        f"Beschrijving: {reg.werkomschrijving}"
                    ),
                    sender_id=user_id,
                    related_entity_type="time_registration",
                    related_entity_id=registration_id,
                )
            except Exception:
                logger.exception("Could not notify office about registration %s", registration_id)

    def _get_editable(self, *, current_user_id: int, current_role: Role, registration_id: int) -> TimeRegistration:
        reg = self._registrations.get_by_id(int(registration_id))
        if not reg:
            raise NotFoundError("Registratie niet gevonden")
        if reg.user_id != int(current_user_id) and not has_permission(current_role, "approve_hours"):
            raise AuthorizationError("Geen toegang")
        return reg

    def update(self, *, current_user_id: int, current_role: Role, registration_id: int, data: dict) -> None:
        reg = self._get_editable(
            current_user_id=current_user_id, current_role=current_role, registration_id=registration_id
        )

        changes: dict[str, Any] = {}
        if "datum" in data:
            try:
                changes["datum"] = as_date(data["datum"])
            except ValueError:
                raise ValidationError("Ongeldige datum (YYYY-MM-DD)")
        if "aantal_uren" in data:
            hours = optional_float(data["aantal_uren"], "Aantal uren")
            if hours is None or hours <= 0:
                raise ValidationError("Aantal uren moet groter zijn dan 0")
            if hours > MAX_HOURS_PER_DAY:
                raise ValidationError("Aantal uren kan niet meer dan 24 uur per dag zijn")
            changes["aantal_uren"] = hours
        for key in ("werktype", "werkomschrijving", "locatie"):
            if key in data:
                changes[key] = str(data[key] or "").strip() or None
        if changes.get("werktype", "") is None or changes.get("werkomschrijving", "") is None:
            raise ValidationError("Werktype en werkomschrijving zijn verplicht")
        if "driven_kilometers" in data:
            changes["driven_kilometers"] = optional_float(data["driven_kilometers"], "Kilometers") or 0.0
        if "progress_percentage" in data:
            changes["progress_percentage"] = _parse_progress(data["progress_percentage"])

        project_id = reg.project_id
        if data.get("project_id"):
            project = self._projects.get_by_id(int(data["project_id"]))
            if not project:
                raise NotFoundError("Project niet gevonden")
            project_id = project.id
            changes["project_id"] = project.id
            changes["project_naam"] = project.naam

        if changes:
            self._registrations.update(reg.id, changes=changes)
        if project_id and changes.get("progress_percentage") is not None:
            self._project_service.raise_progress(project_id, changes["progress_percentage"])

    def delete(self, *, current_user_id: int, current_role: Role, registration_id: int) -> None:
        reg = self._get_editable(
            current_user_id=current_user_id, current_role=current_role, registration_id=registration_id
        )
        if not self._registrations.delete_by_id(reg.id):
            raise ValidationError("Verwijderen van registratie mislukt")

    def list_for_user(
        self, user_id: int, *, date_from: Optional[date] = None, date_to: Optional[date] = None
    ) -> Sequence[TimeRegistration]:
        return self._registrations.list_filtered(user_id=int(user_id), date_from=date_from, date_to=date_to)

    def list_all(
        self,
        *,
        current_role: Role,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[TimeRegistration]:
        if not has_permission(current_role, "view_reports"):
            raise AuthorizationError("Geen toegang")
        return self._registrations.list_filtered(
            user_id=user_id, project_id=project_id, date_from=date_from, date_to=date_to
        )
