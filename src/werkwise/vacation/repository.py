from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, VacationType
from .model import VacationRequest


class VacationRepository(Protocol):
    def create(
        self, *, user_id: int, type: VacationType, start_date: date, end_date: date, reason: Optional[str]
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_requests(
        self, *, user_id: Optional[int] = None, status: Optional[RequestStatus] = None
    ) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def review(
        self,
        request_id: int,
        *,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_note: Optional[str],
    ) -> bool:
        """Decide a pending request; returns False when it was no longer pending."""
        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError
