from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import OFFICE_ROLES, Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: an employee account (profiles table).

    Plain data object; database access lives in the repositories.
    """

    id: int
    naam: str
    email: str
    password_hash: str
    role: Role
    hourly_rate_sale: Optional[float] = None
    hourly_rate_purchase: Optional[float] = None
    vacation_hours_total: float = 0.0
    vacation_hours_used: float = 0.0
    last_activity_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    is_active: bool = True

    @property
    def is_office(self) -> bool:
        return self.role in OFFICE_ROLES

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "naam": self.naam,
            "email": self.email,
            "role": self.role.value,
            "hourly_rate_sale": self.hourly_rate_sale,
            "hourly_rate_purchase": self.hourly_rate_purchase,
            "vacation_hours_total": self.vacation_hours_total,
            "vacation_hours_used": self.vacation_hours_used,
            "last_activity_at": self.last_activity_at.isoformat() if self.last_activity_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class VacationBalance:
    total: float
    used: float

    @property
    def remaining(self) -> float:
        return self.total - self.used

    def to_dict(self) -> dict:
        return {"total": self.total, "used": self.used, "remaining": self.remaining}
