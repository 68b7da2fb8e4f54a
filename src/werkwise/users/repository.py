from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    """Repository interface for employee profiles.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_by_ids(self, user_ids: Iterable[int]) -> Sequence[Profile]:
        raise NotImplementedError

    def list_by_roles(self, roles: Iterable[Role]) -> Sequence[Profile]:
        raise NotImplementedError

    def create(
        self,
        *,
        naam: str,
        email: str,
        password_hash: str,
        role: Role,
        hourly_rate_sale: Optional[float] = None,
        hourly_rate_purchase: Optional[float] = None,
    ) -> int:
        raise NotImplementedError

    def update_hourly_rates(
        self, user_id: int, *, hourly_rate_sale: Optional[float], hourly_rate_purchase: Optional[float]
    ) -> bool:
        raise NotImplementedError

    def update_vacation_hours(self, user_id: int, *, total: float, used: float) -> bool:
        raise NotImplementedError

    def add_vacation_hours_used(self, user_id: int, *, hours: float) -> bool:
        raise NotImplementedError

    def touch_activity(self, user_id: int, *, at: datetime) -> None:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError
