from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..common.datetime_utils import format_nl_date
from ..core.constants import INACTIVITY_THRESHOLD_DAYS
from ..core.enums import OFFICE_ROLES, NotificationType
from ..users.model import Profile
from ..users.repository import ProfileRepository
from .model import NewNotification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

_STATUS_TYPES = (NotificationType.USER_INACTIVE, NotificationType.USER_ACTIVE)


@dataclass(frozen=True)
class ActivitySummary:
    total_users_checked: int
    new_inactive_users: int
    reactivated_users: int
    notifications_created: int
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": "User activity check completed successfully",
            "totalUsersChecked": self.total_users_checked,
            "newInactiveUsers": self.new_inactive_users,
            "reactivatedUsers": self.reactivated_users,
            "notificationsCreated": self.notifications_created,
            "timestamp": self.timestamp.isoformat(),
        }


class UserActivityChecker:
    """Flags field workers who stopped registering hours, and those who came back.

    Office roles are never monitored. A user only gets a new `user_inactive`
    notification when the last status notification about them was not already
    `user_inactive`, so repeated runs stay quiet until the state flips.
    """

    def __init__(
        self,
        profiles: ProfileRepository,
        notifications: NotificationRepository,
        *,
        threshold_days: int = INACTIVITY_THRESHOLD_DAYS,
    ):
        self._profiles = profiles
        self._notifications = notifications
        self._threshold_days = threshold_days

    def _days_idle(self, profile: Profile, now: datetime) -> int:
        since = profile.last_activity_at or profile.created_at
        if not since:
            return 0
        return (now - since).days

    def run(self, now: datetime) -> ActivitySummary:
        threshold = now - timedelta(days=self._threshold_days)
        profiles = self._profiles.list_all()
        office_ids = [p.id for p in profiles if p.role in OFFICE_ROLES]
        monitored = [p for p in profiles if p.role not in OFFICE_ROLES]

        batch: list[NewNotification] = []
        inactive_count = 0
        reactivated_count = 0

        for profile in monitored:
            is_inactive = not profile.last_activity_at or profile.last_activity_at < threshold

            last = self._notifications.latest_for_entity(
                related_entity_type="user",
                related_entity_id=profile.id,
                types=_STATUS_TYPES,
            )
            last_type = last.type if last else None

            if is_inactive and last_type != NotificationType.USER_INACTIVE:
                notification_type = NotificationType.USER_INACTIVE
                title = f"Gebruiker {profile.naam} is inactief geworden"
                last_seen = format_nl_date(profile.last_activity_at) if profile.last_activity_at else "Nooit"
                message = (
                    f"Gebruiker {profile.naam} ({profile.email}) heeft al {self._days_idle(profile, now)} "
                    f"dagen geen tijdregistraties ingediend. Laatste activiteit: {last_seen}"
                )
                inactive_count += 1
            elif not is_inactive and last_type == NotificationType.USER_INACTIVE:
                notification_type = NotificationType.USER_ACTIVE
                title = f"Gebruiker {profile.naam} is weer actief geworden"
                message = (
                    f"Gebruiker {profile.naam} ({profile.email}) heeft weer een tijdregistratie ingediend na "
                    f"een periode van inactiviteit. Laatste activiteit: {format_nl_date(profile.last_activity_at)}"
                )
                reactivated_count += 1
            else:
                continue

            for recipient_id in office_ids:
                batch.append(
                    NewNotification(
                        recipient_id=recipient_id,
                        sender_id=None,
                        type=notification_type,
                        title=title,
                        message=message,
                        related_entity_type="user",
                        related_entity_id=profile.id,
                    )
                )

        if batch:
            self._notifications.create_many(batch)

        summary = ActivitySummary(
            total_users_checked=len(monitored),
            new_inactive_users=inactive_count,
            reactivated_users=reactivated_count,
            notifications_created=len(batch),
            timestamp=now,
        )
        logger.info("Activity check summary: %s", summary.to_dict())
        return summary
