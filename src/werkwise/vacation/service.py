from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import DateLike, as_date, count_work_days
from ..core.constants import HOURS_PER_VACATION_DAY
from ..core.enums import RequestStatus, Role, VacationType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.permissions import has_permission
from ..users.repository import ProfileRepository
from .model import VacationRequest
from .repository import VacationRepository

logger = logging.getLogger(__name__)


def requested_hours(start: Optional[DateLike], end: Optional[DateLike]) -> float:
    """Vacation hours a request costs: Monday..Friday days times a working day."""
    return float(count_work_days(start, end) * HOURS_PER_VACATION_DAY)


class VacationService:
    def __init__(self, requests: VacationRepository, profiles: ProfileRepository):
        self._requests = requests
        self._profiles = profiles

    def create(self, *, user_id: int, type: str, start_date, end_date, reason: Optional[str] = None) -> int:
        if not start_date or not end_date:
            raise ValidationError("Vul een begin- en einddatum in")
        try:
            start = as_date(start_date)
            end = as_date(end_date)
        except ValueError:
            raise ValidationError("Ongeldige datum (YYYY-MM-DD)")
        if end < start:
            raise ValidationError("Einddatum moet na begindatum liggen")

        try:
            vacation_type = VacationType(type or VacationType.VAKANTIE.value)
        except ValueError:
            raise ValidationError("Ongeldig type afwezigheid")

        return self._requests.create(
            user_id=int(user_id),
            type=vacation_type,
            start_date=start,
            end_date=end,
            reason=(reason or "").strip() or None,
        )

    def review(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        status: str,
        note: Optional[str] = None,
        now: datetime,
    ) -> VacationRequest:
        if not has_permission(current_role, "approve_vacation"):
            raise AuthorizationError("Geen toegang")

        try:
            decision = RequestStatus(status)
        except ValueError:
            raise ValidationError("Ongeldige status")
        if decision == RequestStatus.PENDING:
            raise ValidationError("Kies goedkeuren of afwijzen")

        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Aanvraag niet gevonden")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Aanvraag is al beoordeeld")

        if not self._requests.review(
            req.id,
            status=decision,
            reviewed_by=int(reviewer_id),
            reviewed_at=now,
            review_note=(note or "").strip() or None,
        ):
            raise ValidationError("Aanvraag is al beoordeeld")

        if decision == RequestStatus.APPROVED and req.type == VacationType.VAKANTIE:
            hours = requested_hours(req.start_date, req.end_date)
            self._profiles.add_vacation_hours_used(req.user_id, hours=hours)
            logger.info("Booked %s vacation hours for user %s", hours, req.user_id)

        return self._requests.get_by_id(req.id) or req

    def delete(self, *, user_id: int, request_id: int) -> None:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Aanvraag niet gevonden")
        if req.user_id != int(user_id):
            raise AuthorizationError("U kunt alleen uw eigen aanvragen verwijderen")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Alleen openstaande aanvragen kunnen worden verwijderd")
        self._requests.delete_by_id(req.id)

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        return self._requests.list_requests(user_id=int(user_id))

    def list_all(self, *, current_role: Role, status: Optional[str] = None) -> Sequence[VacationRequest]:
        if not has_permission(current_role, "approve_vacation"):
            raise AuthorizationError("Geen toegang")
        if status:
            try:
                return self._requests.list_requests(status=RequestStatus(status))
            except ValueError:
                raise ValidationError("Ongeldige status")
        return self._requests.list_requests()
