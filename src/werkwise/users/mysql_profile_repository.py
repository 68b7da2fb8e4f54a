from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause, optional_float
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = """
    id, naam, email, password_hash, role, hourly_rate_sale, hourly_rate_purchase, vacation_hours_total,
    vacation_hours_used, last_activity_at, created_at, is_active
"""


def _to_profile(row: dict) -> Profile:
    return Profile(
        id=int(row["id"]),
        naam=row["naam"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        hourly_rate_sale=optional_float(row.get("hourly_rate_sale")),
        hourly_rate_purchase=optional_float(row.get("hourly_rate_purchase")),
        vacation_hours_total=as_float(row.get("vacation_hours_total")),
        vacation_hours_used=as_float(row.get("vacation_hours_used")),
        last_activity_at=row.get("last_activity_at"),
        created_at=row.get("created_at"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email.lower(),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY naam")
            return [_to_profile(r) for r in fetchall(cur)]

    def list_by_ids(self, user_ids: Iterable[int]) -> Sequence[Profile]:
        ids = [int(i) for i in user_ids]
        if not ids:
            return []
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id IN ({placeholders})", params)
            return [_to_profile(r) for r in fetchall(cur)]

    def list_by_roles(self, roles: Iterable[Role]) -> Sequence[Profile]:
        values = [Role(r).value for r in roles]
        if not values:
            return []
        placeholders, params = in_clause(values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE role IN ({placeholders})", params)
            return [_to_profile(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(naam, email, password_hash, role, hourly_rate_sale, hourly_rate_purchase, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (naam, email.lower(), password_hash, role.value, hourly_rate_sale, hourly_rate_purchase),
            )
            return int(cur.lastrowid)

    def update_hourly_rates(
        self, user_id: int, *, hourly_rate_sale: Optional[float], hourly_rate_purchase: Optional[float]
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET hourly_rate_sale=%s, hourly_rate_purchase=%s WHERE id=%s",
                (hourly_rate_sale, hourly_rate_purchase, user_id),
            )
            return cur.rowcount > 0

    def update_vacation_hours(self, user_id: int, *, total: float, used: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET vacation_hours_total=%s, vacation_hours_used=%s WHERE id=%s",
                (total, used, user_id),
            )
            return cur.rowcount > 0

    def add_vacation_hours_used(self, user_id: int, *, hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET vacation_hours_used = vacation_hours_used + %s WHERE id=%s",
                (hours, user_id),
            )
            return cur.rowcount > 0

    def touch_activity(self, user_id: int, *, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET last_activity_at=%s WHERE id=%s", (at, user_id))

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM profiles WHERE id=%s", (user_id,))
            return cur.rowcount > 0

    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM profiles WHERE role=%s", (role.value,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0
