from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import DamageItemType, DamageStatus


@dataclass(frozen=True)
class DamageReport:
    """Damage to a tool, material or van, reported by an employee."""

    id: int
    type_item: DamageItemType
    naam: str
    beschrijving_schade: str
    datum: date
    created_by: int
    status: DamageStatus = DamageStatus.GEMELD
    beschrijving: Optional[str] = None
    foto_urls: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    created_by_naam: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type_item": self.type_item.value,
            "naam": self.naam,
            "beschrijving": self.beschrijving,
            "beschrijving_schade": self.beschrijving_schade,
            "datum": self.datum.isoformat(),
            "foto_urls": list(self.foto_urls) or None,
            "status": self.status.value,
            "created_by": self.created_by,
            "created_by_naam": self.created_by_naam,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class DamageReportFields:
    type_item: DamageItemType
    naam: str
    beschrijving: str
    beschrijving_schade: str
    datum: date
    foto_urls: tuple[str, ...] = ()
