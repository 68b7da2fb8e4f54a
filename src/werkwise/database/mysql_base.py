from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_float(value: Any, default: float = 0.0) -> float:
    """DECIMAL columns come back as Decimal; everything here works in floats."""
    return default if value is None else float(value)


def optional_float(value: Any) -> Optional[float]:
    return None if value is None else as_float(value)


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON column (str/bytes from the connector, or already decoded)."""
    if value is None or value == "":
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return value


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def in_clause(values) -> tuple[str, tuple]:
    """Placeholders for `col IN (...)`; callers must not pass an empty list."""
    values = tuple(values)
    return ", ".join(["%s"] * len(values)), values
