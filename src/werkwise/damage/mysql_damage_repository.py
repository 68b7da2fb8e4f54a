from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DamageItemType, DamageStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import DamageReport, DamageReportFields
from .repository import DamageReportRepository

_SELECT = """
    SELECT d.id, d.type_item, d.naam, d.beschrijving, d.beschrijving_schade, d.datum, d.foto_urls,
           d.status, d.created_by, d.created_at, u.naam AS created_by_naam
    FROM damage_reports d
    LEFT JOIN profiles u ON u.id = d.created_by
"""


def _to_report(row: dict) -> DamageReport:
    return DamageReport(
        id=int(row["id"]),
        type_item=DamageItemType(row["type_item"]),
        naam=row["naam"],
        beschrijving=row.get("beschrijving"),
        beschrijving_schade=row["beschrijving_schade"],
        datum=row["datum"],
        foto_urls=tuple(load_json(row.get("foto_urls"), [])),
        status=DamageStatus(row["status"]),
        created_by=int(row["created_by"]),
        created_at=row.get("created_at"),
        created_by_naam=row.get("created_by_naam"),
    )


def _photos(fields: DamageReportFields) -> Optional[str]:
    return dump_json(list(fields.foto_urls)) if fields.foto_urls else None


class MySQLDamageReportRepository(DamageReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, fields: DamageReportFields, *, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO damage_reports(
                    type_item, naam, beschrijving, beschrijving_schade, datum, foto_urls, status, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,'gemeld',%s)
                """,
                (
                    fields.type_item.value,
                    fields.naam,
                    fields.beschrijving,
                    fields.beschrijving_schade,
                    fields.datum,
                    _photos(fields),
                    created_by,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[DamageReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.id=%s", (report_id,))
            row = fetchone(cur)
            return _to_report(row) if row else None

    def list_reports(self, *, created_by: Optional[int] = None) -> Sequence[DamageReport]:
        sql = _SELECT
        params: tuple = ()
        if created_by is not None:
            sql += " WHERE d.created_by=%s"
            params = (int(created_by),)
        sql += " ORDER BY d.created_at DESC, d.id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_report(r) for r in fetchall(cur)]

    def update(self, report_id: int, fields: DamageReportFields) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE damage_reports
                SET type_item=%s, naam=%s, beschrijving=%s, beschrijving_schade=%s, datum=%s, foto_urls=%s
                WHERE id=%s
                """,
                (
                    fields.type_item.value,
                    fields.naam,
                    fields.beschrijving,
                    fields.beschrijving_schade,
                    fields.datum,
                    _photos(fields),
                    report_id,
                ),
            )
            return cur.rowcount > 0

    def set_status(self, report_id: int, status: DamageStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE damage_reports SET status=%s WHERE id=%s", (status.value, report_id))
            return cur.rowcount > 0

    def delete_by_id(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM damage_reports WHERE id=%s", (report_id,))
            return cur.rowcount > 0
