from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ProjectStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import Project, ProjectFields
from .repository import ProjectRepository

_COLUMNS = """
    id, naam, project_nummer, beschrijving, locatie, start_datum, status, estimated_hours,
    calculated_hours, progress_percentage, oppervlakte_m2, created_at, updated_at
"""


def _to_project(row: dict) -> Project:
    return Project(
        id=int(row["id"]),
        naam=row["naam"],
        status=ProjectStatus(row["status"]),
        project_nummer=row.get("project_nummer"),
        beschrijving=row.get("beschrijving"),
        locatie=row.get("locatie"),
        start_datum=row.get("start_datum"),
        estimated_hours=optional_float(row.get("estimated_hours")),
        calculated_hours=optional_float(row.get("calculated_hours")),
        progress_percentage=int(row.get("progress_percentage") or 0),
        oppervlakte_m2=optional_float(row.get("oppervlakte_m2")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _field_params(fields: ProjectFields) -> tuple:
    return (
        fields.naam,
        fields.project_nummer,
        fields.beschrijving,
        fields.locatie,
        fields.start_datum,
        fields.status.value,
        fields.estimated_hours,
        fields.calculated_hours,
        fields.progress_percentage,
        fields.oppervlakte_m2,
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE id=%s", (project_id,))
            row = fetchone(cur)
            return _to_project(row) if row else None

    def get_by_name(self, naam: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE naam=%s ORDER BY id LIMIT 1", (naam,))
            row = fetchone(cur)
            return _to_project(row) if row else None

    def find_by_name_like(self, fragment: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM projects WHERE naam LIKE %s ORDER BY id LIMIT 1",
                (f"%{fragment}%",),
            )
            row = fetchone(cur)
            return _to_project(row) if row else None

    def list_all(self, *, status: Optional[ProjectStatus] = None) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(f"SELECT {_COLUMNS} FROM projects ORDER BY created_at DESC, id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM projects WHERE status=%s ORDER BY created_at DESC, id DESC",
                    (status.value,),
                )
            return [_to_project(r) for r in fetchall(cur)]

    def create(self, fields: ProjectFields) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(
                    naam, project_nummer, beschrijving, locatie, start_datum, status,
                    estimated_hours, calculated_hours, progress_percentage, oppervlakte_m2
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _field_params(fields),
            )
            return int(cur.lastrowid)

    def update(self, project_id: int, fields: ProjectFields) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE projects
                SET naam=%s, project_nummer=%s, beschrijving=%s, locatie=%s, start_datum=%s, status=%s,
                    estimated_hours=%s, calculated_hours=%s, progress_percentage=%s, oppervlakte_m2=%s
                WHERE id=%s
                """,
                (*_field_params(fields), project_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, project_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM projects WHERE id=%s", (project_id,))
            return cur.rowcount > 0

    def set_progress(self, project_id: int, *, progress_percentage: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE projects SET progress_percentage=%s WHERE id=%s",
                (progress_percentage, project_id),
            )
            return cur.rowcount > 0
