from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class Project:
    id: int
    naam: str
    status: ProjectStatus
    project_nummer: Optional[str] = None
    beschrijving: Optional[str] = None
    locatie: Optional[str] = None
    start_datum: Optional[date] = None
    estimated_hours: Optional[float] = None
    calculated_hours: Optional[float] = None
    progress_percentage: int = 0
    oppervlakte_m2: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "naam": self.naam,
            "project_nummer": self.project_nummer,
            "beschrijving": self.beschrijving,
            "locatie": self.locatie,
            "start_datum": self.start_datum.isoformat() if self.start_datum else None,
            "status": self.status.value,
            "estimated_hours": self.estimated_hours,
            "calculated_hours": self.calculated_hours,
            "progress_percentage": self.progress_percentage,
            "oppervlakte_m2": self.oppervlakte_m2,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class ProjectFields:
    """Validated input for create/update."""

    naam: str
    status: ProjectStatus
    project_nummer: Optional[str]
    beschrijving: Optional[str]
    locatie: Optional[str]
    start_datum: Optional[date]
    estimated_hours: Optional[float]
    calculated_hours: Optional[float]
    progress_percentage: int
    oppervlakte_m2: Optional[float]
