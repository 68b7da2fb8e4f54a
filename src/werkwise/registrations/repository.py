from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import NewRegistration, TimeRegistration


class TimeRegistrationRepository(Protocol):
    def create_many(self, registrations: Sequence[NewRegistration]) -> list[int]:
        raise NotImplementedError

    def get_by_id(self, registration_id: int) -> Optional[TimeRegistration]:
        raise NotImplementedError

    def update(self, registration_id: int, *, changes: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, registration_id: int) -> bool:
        raise NotImplementedError

    def list_filtered(
        self,
        *,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeRegistration]:
        raise NotImplementedError
