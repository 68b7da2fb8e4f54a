from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import NotificationStatus, NotificationType
from .model import NewNotification, Notification


class NotificationRepository(Protocol):
    def create_many(self, notifications: Sequence[NewNotification]) -> int:
        raise NotImplementedError

    def list_for_recipient(
        self,
        recipient_id: int,
        *,
        status: Optional[NotificationStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Notification]:
        raise NotImplementedError

    def set_status(self, notification_id: int, *, recipient_id: int, status: NotificationStatus) -> bool:
        raise NotImplementedError

    def mark_all_read(self, recipient_id: int) -> int:
        raise NotImplementedError

    def count_unread(self, recipient_id: int) -> int:
        raise NotImplementedError

    def latest_for_entity(
        self, *, related_entity_type: str, related_entity_id: int, types: Iterable[NotificationType]
    ) -> Optional[Notification]:
        raise NotImplementedError
