from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import RegistrationStatus


@dataclass(frozen=True)
class MaterialLine:
    """Material used on a work line: an inventory product or a free description."""

    type: str
    quantity: float
    unit: str = ""
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    description: Optional[str] = None

    @property
    def label(self) -> str:
        return (self.product_name if self.type == "product" else self.description) or ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MaterialLine":
        product_id = data.get("product_id")
        return cls(
            type=str(data.get("type") or "description"),
            quantity=float(data.get("quantity") or 0),
            unit=str(data.get("unit") or ""),
            product_id=int(product_id) if product_id not in (None, "") else None,
            product_name=data.get("product_name"),
            description=data.get("description"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "quantity": self.quantity,
            "unit": self.unit,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "description": self.description,
        }


@dataclass(frozen=True)
class WorkLine:
    werktype: str
    werkomschrijving: str
    aantal_uren: float
    materials: tuple[MaterialLine, ...] = ()


@dataclass(frozen=True)
class TimeRegistration:
    id: int
    user_id: int
    project_id: Optional[int]
    project_naam: Optional[str]
    datum: date
    werktype: str
    aantal_uren: float
    werkomschrijving: str
    status: RegistrationStatus
    locatie: Optional[str] = None
    driven_kilometers: float = 0.0
    progress_percentage: Optional[int] = None
    verbruikt_materiaal: Optional[str] = None
    materials: tuple[MaterialLine, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Joined columns, filled by list queries.
    user_naam: Optional[str] = None
    project_display_naam: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_naam": self.user_naam,
            "project_id": self.project_id,
            "project_naam": self.project_naam or self.project_display_naam,
            "datum": self.datum.isoformat(),
            "werktype": self.werktype,
            "aantal_uren": self.aantal_uren,
            "werkomschrijving": self.werkomschrijving,
            "locatie": self.locatie,
            "driven_kilometers": self.driven_kilometers,
            "progress_percentage": self.progress_percentage,
            "verbruikt_materiaal": self.verbruikt_materiaal,
            "materials": [m.to_dict() for m in self.materials],
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class NewRegistration:
    user_id: int
    project_id: Optional[int]
    project_naam: Optional[str]
    datum: date
    werktype: str
    aantal_uren: float
    werkomschrijving: str
    driven_kilometers: float
    progress_percentage: Optional[int]
    materials: tuple[MaterialLine, ...]
    status: RegistrationStatus = RegistrationStatus.SUBMITTED
    locatie: Optional[str] = None
