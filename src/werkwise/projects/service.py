from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_float, require_non_empty, require_range
from ..core.enums import ProjectStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..inventory.model import InventoryTransaction
from ..inventory.repository import InventoryRepository
from ..registrations.model import TimeRegistration
from ..registrations.repository import TimeRegistrationRepository
from ..users.permissions import has_permission
from .model import Project, ProjectFields
from .repository import ProjectRepository


@dataclass(frozen=True)
class ProjectUserHours:
    user_id: int
    naam: str
    total_hours: float
    registrations: tuple[TimeRegistration, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "naam": self.naam,
            "total_hours": self.total_hours,
            "registrations": [r.to_dict() for r in self.registrations],
        }


@dataclass(frozen=True)
class ProjectDetails:
    project: Project
    total_hours: float
    total_kilometers: float
    users: tuple[ProjectUserHours, ...] = ()
    registrations: tuple[TimeRegistration, ...] = ()
    materials: tuple[InventoryTransaction, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project.to_dict(),
            "total_hours": self.total_hours,
            "total_kilometers": self.total_kilometers,
            "users": [u.to_dict() for u in self.users],
            "registrations": [r.to_dict() for r in self.registrations],
            "materials": [m.to_dict() for m in self.materials],
        }


def group_hours_by_user(registrations: Sequence[TimeRegistration]) -> list[ProjectUserHours]:
    """Per-user hour totals, highest first."""
    grouped: dict[int, list[TimeRegistration]] = {}
    for reg in registrations:
        grouped.setdefault(reg.user_id, []).append(reg)

    out = [
        ProjectUserHours(
            user_id=user_id,
            naam=regs[0].user_naam or "Onbekende gebruiker",
            total_hours=sum(r.aantal_uren for r in regs),
            registrations=tuple(regs),
        )
        for user_id, regs in grouped.items()
    ]
    out.sort(key=lambda u: u.total_hours, reverse=True)
    return out


class ProjectService:
    def __init__(
        self,
        projects: ProjectRepository,
        registrations: TimeRegistrationRepository,
        inventory: InventoryRepository,
    ):
        self._projects = projects
        self._registrations = registrations
        self._inventory = inventory

    @staticmethod
    def _require_manage(current_role: Role) -> None:
        if not has_permission(current_role, "manage_projects"):
            raise AuthorizationError("Geen toegang")

    @staticmethod
    def _parse_fields(data: dict) -> ProjectFields:
        naam = require_non_empty(data.get("naam"), "Projectnaam")

        try:
            status = ProjectStatus(data.get("status") or ProjectStatus.ACTIEF.value)
        except ValueError:
            raise ValidationError("Ongeldige projectstatus")

        start_raw = str(data.get("start_datum") or "").strip()
        try:
            start_datum = parse_iso_date(start_raw) if start_raw else None
        except ValueError:
            raise ValidationError("Ongeldige startdatum (YYYY-MM-DD)")

        progress = int(optional_float(data.get("progress_percentage"), "Voortgang") or 0)
        require_range(progress, "Voortgang", minimum=0, maximum=100)

        def _text(key: str) -> Optional[str]:
            value = str(data.get(key) or "").strip()
            return value or None

        return ProjectFields(
            naam=naam,
            status=status,
            project_nummer=_text("project_nummer"),
            beschrijving=_text("beschrijving"),
            locatie=_text("locatie"),
            start_datum=start_datum,
            estimated_hours=optional_float(data.get("estimated_hours"), "Geschatte uren"),
            calculated_hours=optional_float(data.get("calculated_hours"), "Berekende uren"),
            progress_percentage=progress,
            oppervlakte_m2=optional_float(data.get("oppervlakte_m2"), "Oppervlakte"),
        )

    def list_projects(self, *, status: Optional[str] = None) -> Sequence[Project]:
        if status:
            try:
                return self._projects.list_all(status=ProjectStatus(status))
            except ValueError:
                raise ValidationError("Ongeldige projectstatus")
        return self._projects.list_all()

    def get_project(self, project_id: int) -> Project:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError("Project niet gevonden")
        return project

    def create_project(self, *, current_role: Role, data: dict) -> int:
        self._require_manage(current_role)
        return self._projects.create(self._parse_fields(data))

    def update_project(self, *, current_role: Role, project_id: int, data: dict) -> None:
        self._require_manage(current_role)
        self.get_project(project_id)
        if not self._projects.update(int(project_id), self._parse_fields(data)):
            raise ValidationError("Bijwerken van project mislukt")

    def delete_project(self, *, current_role: Role, project_id: int) -> None:
        self._require_manage(current_role)
        self.get_project(project_id)
        if not self._projects.delete_by_id(int(project_id)):
            raise ValidationError("Verwijderen van project mislukt")

    def raise_progress(self, project_id: int, progress_percentage: Optional[int]) -> bool:
        """Move progress up to `progress_percentage`; lower values are ignored."""
        if progress_percentage is None:
            return False
        require_range(progress_percentage, "Voortgang", minimum=0, maximum=100)

        project = self._projects.get_by_id(int(project_id))
        if not project or progress_percentage <= project.progress_percentage:
            return False
        return self._projects.set_progress(int(project_id), progress_percentage=int(progress_percentage))

    def project_details(self, project_id: int, *, current_role: Role, current_user_id: int) -> ProjectDetails:
        project = self.get_project(project_id)

        registrations = list(self._registrations.list_filtered(project_id=project.id))
        if not has_permission(current_role, "view_reports"):
            registrations = [r for r in registrations if r.user_id == int(current_user_id)]

        materials = self._inventory.list_transactions(project_id=project.id)

        return ProjectDetails(
            project=project,
            total_hours=sum(r.aantal_uren for r in registrations),
            total_kilometers=sum(r.driven_kilometers for r in registrations),
            users=tuple(group_hours_by_user(registrations)),
            registrations=tuple(registrations),
            materials=tuple(materials),
        )
