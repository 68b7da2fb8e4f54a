from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, VacationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import VacationRequest
from .repository import VacationRepository

_SELECT = """
    SELECT v.id, v.user_id, v.type, v.start_date, v.end_date, v.reason, v.status, v.reviewed_by,
           v.reviewed_at, v.review_note, v.created_at,
           u.naam AS user_naam, r.naam AS reviewer_naam
    FROM vacation_requests v
    LEFT JOIN profiles u ON u.id = v.user_id
    LEFT JOIN profiles r ON r.id = v.reviewed_by
"""


def _to_request(row: dict) -> VacationRequest:
    return VacationRequest(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        type=VacationType(row["type"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=RequestStatus(row["status"]),
        reason=row.get("reason"),
        reviewed_by=row.get("reviewed_by"),
        reviewed_at=row.get("reviewed_at"),
        review_note=row.get("review_note"),
        created_at=row.get("created_at"),
        user_naam=row.get("user_naam"),
        reviewer_naam=row.get("reviewer_naam"),
    )


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self, *, user_id: int, type: VacationType, start_date: date, end_date: date, reason: Optional[str]
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(user_id, type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,'pending')
                """,
                (user_id, type.value, start_date, end_date, reason),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE v.id=%s", (request_id,))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list_requests(
        self, *, user_id: Optional[int] = None, status: Optional[RequestStatus] = None
    ) -> Sequence[VacationRequest]:
        where: list[str] = []
        params: list = []
        if user_id is not None:
            where.append("v.user_id=%s")
            params.append(int(user_id))
        if status is not None:
            where.append("v.status=%s")
            params.append(status.value)
        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY v.created_at DESC, v.id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def review(
        self,
        request_id: int,
        *,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_note: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_note=%s
                WHERE id=%s AND status='pending'
                """,
                (status.value, reviewed_by, reviewed_at, review_note, request_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM vacation_requests WHERE id=%s", (request_id,))
            return cur.rowcount > 0
