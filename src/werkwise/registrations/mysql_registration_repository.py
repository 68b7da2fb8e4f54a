from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RegistrationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import MaterialLine, NewRegistration, TimeRegistration
from .repository import TimeRegistrationRepository

_UPDATABLE = {
    "datum",
    "werktype",
    "aantal_uren",
    "werkomschrijving",
    "project_id",
    "project_naam",
    "locatie",
    "progress_percentage",
    "driven_kilometers",
    "status",
}

_SELECT = """
    SELECT r.id, r.user_id, r.project_id, r.project_naam, r.datum, r.werktype, r.aantal_uren,
           r.werkomschrijving, r.locatie, r.driven_kilometers, r.progress_percentage,
           r.verbruikt_materiaal, r.materials, r.status, r.created_at, r.updated_at,
           u.naam AS user_naam, p.naam AS project_display_naam
    FROM time_registrations r
    LEFT JOIN profiles u ON u.id = r.user_id
    LEFT JOIN projects p ON p.id = r.project_id
"""


def _to_registration(row: dict) -> TimeRegistration:
    progress = row.get("progress_percentage")
    return TimeRegistration(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        project_id=row.get("project_id"),
        project_naam=row.get("project_naam"),
        datum=row["datum"],
        werktype=row["werktype"],
        aantal_uren=as_float(row["aantal_uren"]),
        werkomschrijving=row["werkomschrijving"],
        status=RegistrationStatus(row["status"]),
        locatie=row.get("locatie"),
        driven_kilometers=as_float(row.get("driven_kilometers")),
        progress_percentage=int(progress) if progress is not None else None,
        verbruikt_materiaal=row.get("verbruikt_materiaal"),
        materials=tuple(MaterialLine.from_dict(m) for m in load_json(row.get("materials"), [])),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        user_naam=row.get("user_naam"),
        project_display_naam=row.get("project_display_naam"),
    )


class MySQLTimeRegistrationRepository(TimeRegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, registrations: Sequence[NewRegistration]) -> list[int]:
        ids: list[int] = []
        # one transaction: either every work line is stored or none
        with db_cursor(self._conn_factory) as (_, cur):
            for reg in registrations:
                cur.execute(
                    """
                    INSERT INTO time_registrations(
                        user_id, project_id, project_naam, datum, werktype, aantal_uren,
                        werkomschrijving, locatie, driven_kilometers, progress_percentage, materials, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        reg.user_id,
                        reg.project_id,
                        reg.project_naam,
                        reg.datum,
                        reg.werktype,
                        reg.aantal_uren,
                        reg.werkomschrijving,
                        reg.locatie,
                        reg.driven_kilometers,
                        reg.progress_percentage,
                        dump_json([m.to_dict() for m in reg.materials]),
                        reg.status.value,
                    ),
                )
                ids.append(int(cur.lastrowid))
        return ids

    def get_by_id(self, registration_id: int) -> Optional[TimeRegistration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.id=%s", (registration_id,))
            row = fetchone(cur)
            return _to_registration(row) if row else None

    def update(self, registration_id: int, *, changes: dict) -> bool:
        fields = {k: v for k, v in changes.items() if k in _UPDATABLE}
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        params = [v.value if isinstance(v, RegistrationStatus) else v for v in fields.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE time_registrations SET {assignments} WHERE id=%s", (*params, registration_id))
            return cur.rowcount > 0

    def delete_by_id(self, registration_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_registrations WHERE id=%s", (registration_id,))
            return cur.rowcount > 0

    def list_filtered(
        self,
        *,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeRegistration]:
        where: list[str] = []
        params: list = []
        if user_id is not None:
            where.append("r.user_id=%s")
            params.append(int(user_id))
        if project_id is not None:
            where.append("r.project_id=%s")
            params.append(int(project_id))
        if date_from is not None:
            where.append("r.datum>=%s")
            params.append(date_from)
        if date_to is not None:
            where.append("r.datum<=%s")
            params.append(date_to)

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY r.datum DESC, r.id DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_registration(r) for r in fetchall(cur)]
