from __future__ import annotations

from dataclasses import fields
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import MODULE_FLAGS, InvoiceSettings, SystemSettings, normalize_separator
from .repository import SettingsRepository

# Both tables hold a single row.
_SINGLETON_ID = 1
_INVOICE_FIELDS = [f.name for f in fields(InvoiceSettings)]


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_system_settings(self) -> Optional[SystemSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(MODULE_FLAGS)}, csv_separator FROM system_settings WHERE id=%s",
                (_SINGLETON_ID,),
            )
            row = fetchone(cur)
            if not row:
                return None
            flags = {name: bool(row.get(name, True)) for name in MODULE_FLAGS}
            return SystemSettings(**flags, csv_separator=normalize_separator(row.get("csv_separator")))

    def save_system_settings(self, settings: SystemSettings, *, updated_by: Optional[int]) -> None:
        columns = [*MODULE_FLAGS, "csv_separator", "updated_by"]
        values = [int(getattr(settings, name)) for name in MODULE_FLAGS]
        values += [settings.csv_separator, updated_by]
        updates = ", ".join(f"{c}=VALUES({c})" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO system_settings(id, {', '.join(columns)})
                VALUES(%s, {', '.join(['%s'] * len(columns))})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (_SINGLETON_ID, *values),
            )

    def get_invoice_settings(self) -> Optional[InvoiceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {', '.join(_INVOICE_FIELDS)} FROM invoice_settings WHERE id=%s", (_SINGLETON_ID,))
            row = fetchone(cur)
            if not row:
                return None
            data = {name: row.get(name) for name in _INVOICE_FIELDS}
            data["payment_terms_days"] = int(data.get("payment_terms_days") or 30)
            data["invoice_prefix"] = data.get("invoice_prefix") or "F"
            return InvoiceSettings(**data)

    def save_invoice_settings(self, settings: InvoiceSettings) -> None:
        values = [getattr(settings, name) for name in _INVOICE_FIELDS]
        updates = ", ".join(f"{c}=VALUES({c})" for c in _INVOICE_FIELDS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO invoice_settings(id, {', '.join(_INVOICE_FIELDS)})
                VALUES(%s, {', '.join(['%s'] * len(_INVOICE_FIELDS))})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (_SINGLETON_ID, *values),
            )
