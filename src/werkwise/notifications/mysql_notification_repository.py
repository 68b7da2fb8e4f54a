from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import NotificationStatus, NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewNotification, Notification
from .repository import NotificationRepository

_COLUMNS = """
    id, recipient_id, sender_id, type, title, message, related_entity_type, related_entity_id,
    status, created_at
"""


def _to_notification(row: dict) -> Notification:
    return Notification(
        id=int(row["id"]),
        recipient_id=int(row["recipient_id"]),
        sender_id=row.get("sender_id"),
        type=NotificationType(row["type"]),
        title=row["title"],
        message=row["message"],
        related_entity_type=row.get("related_entity_type"),
        related_entity_id=row.get("related_entity_id"),
        status=NotificationStatus(row["status"]),
        created_at=row.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, notifications: Sequence[NewNotification]) -> int:
        if not notifications:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(
                    recipient_id, sender_id, type, title, message, related_entity_type, related_entity_id, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,'unread')
                """,
                [
                    (
                        n.recipient_id,
                        n.sender_id,
                        n.type.value,
                        n.title,
                        n.message,
                        n.related_entity_type,
                        n.related_entity_id,
                    )
                    for n in notifications
                ],
            )
            return len(notifications)

    def list_for_recipient(
        self,
        recipient_id: int,
        *,
        status: Optional[NotificationStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Notification]:
        sql = f"SELECT {_COLUMNS} FROM notifications WHERE recipient_id=%s"
        params: list = [recipient_id]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        else:
            sql += " AND status<>'archived'"
        sql += " ORDER BY created_at DESC, id DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_notification(r) for r in fetchall(cur)]

    def set_status(self, notification_id: int, *, recipient_id: int, status: NotificationStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET status=%s WHERE id=%s AND recipient_id=%s",
                (status.value, notification_id, recipient_id),
            )
            return cur.rowcount > 0

    def mark_all_read(self, recipient_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET status='read' WHERE recipient_id=%s AND status='unread'",
                (recipient_id,),
            )
            return int(cur.rowcount)

    def count_unread(self, recipient_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM notifications WHERE recipient_id=%s AND status='unread'",
                (recipient_id,),
            )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def latest_for_entity(
        self, *, related_entity_type: str, related_entity_id: int, types: Iterable[NotificationType]
    ) -> Optional[Notification]:
        placeholders, type_params = in_clause(t.value for t in types)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM notifications
                WHERE related_entity_type=%s AND related_entity_id=%s AND type IN ({placeholders})
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """,
                (related_entity_type, related_entity_id, *type_params),
            )
            row = fetchone(cur)
            return _to_notification(row) if row else None
