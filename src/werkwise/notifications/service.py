from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import OFFICE_ROLES, NotificationStatus, NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import ProfileRepository
from .model import NewNotification, Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """In-app notifications. Office staff (admin, kantoorpersoneel) receive system events."""

    def __init__(self, notifications: NotificationRepository, profiles: ProfileRepository):
        self._notifications = notifications
        self._profiles = profiles

    def office_recipient_ids(self) -> list[int]:
        return [p.id for p in self._profiles.list_by_roles(OFFICE_ROLES)]

    def notify_office(
        self,
        *,
        type: NotificationType,
        title: str,
        message: str,
        sender_id: Optional[int] = None,
        related_entity_type: Optional[str] = None,
        related_entity_id: Optional[int] = None,
    ) -> int:
        """One notification per office user; returns how many were created."""
        batch = [
            NewNotification(
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=type,
                title=title,
                message=message,
                related_entity_type=related_entity_type,
                related_entity_id=related_entity_id,
            )
            for recipient_id in self.office_recipient_ids()
        ]
        created = self._notifications.create_many(batch)
        logger.debug("Created %s %s notifications", created, type.value)
        return created

    def list_for_user(self, user_id: int, *, status: Optional[str] = None) -> Sequence[Notification]:
        if status:
            try:
                return self._notifications.list_for_recipient(int(user_id), status=NotificationStatus(status))
            except ValueError:
                raise ValidationError("Ongeldige status")
        return self._notifications.list_for_recipient(int(user_id))

    def unread_count(self, user_id: int) -> int:
        return self._notifications.count_unread(int(user_id))

    def mark_read(self, *, user_id: int, notification_id: int) -> None:
        if not self._notifications.set_status(
            int(notification_id), recipient_id=int(user_id), status=NotificationStatus.READ
        ):
            raise NotFoundError("Melding niet gevonden")

    def mark_all_read(self, *, user_id: int) -> int:
        return self._notifications.mark_all_read(int(user_id))

    def archive(self, *, user_id: int, notification_id: int) -> None:
        if not self._notifications.set_status(
            int(notification_id), recipient_id=int(user_id), status=NotificationStatus.ARCHIVED
        ):
            raise NotFoundError("Melding niet gevonden")
