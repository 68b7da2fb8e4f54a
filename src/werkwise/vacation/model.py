from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import RequestStatus, VacationType


@dataclass(frozen=True)
class VacationRequest:
    id: int
    user_id: int
    type: VacationType
    start_date: date
    end_date: date
    status: RequestStatus
    reason: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None
    created_at: Optional[datetime] = None
    user_naam: Optional[str] = None
    reviewer_naam: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_naam": self.user_naam,
            "type": self.type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "reviewed_by": self.reviewed_by,
            "reviewer_naam": self.reviewer_naam,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "review_note": self.review_note,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
