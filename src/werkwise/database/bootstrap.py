from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"

# CREATE DATABASE / USE lines are dropped; DB_CONFIG names the target database.
_DATABASE_STATEMENT = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$", re.IGNORECASE | re.MULTILINE)
_SQL_TOKEN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|;|[^'";]+|['"]""", re.DOTALL)


def split_sql_script(sql: str) -> Iterator[str]:
    """Yield the statements of a schema script; `;` inside quoted literals does not split."""
    sql = _DATABASE_STATEMENT.sub("", sql)
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))

    pending: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token != ";":
            pending.append(token)
            continue
        statement = "".join(pending).strip()
        pending = []
        if statement:
            yield statement

    statement = "".join(pending).strip()
    if statement:
        yield statement


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for statement in split_sql_script(sql):
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset) the login accounts used for local development."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(table: str, naam: str, email: str, password: str, role: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute(f"SELECT id FROM {table} WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    f"UPDATE {table} SET naam=%s, password_hash=%s, role=%s, is_active=1 WHERE email=%s",
                    (naam, password_hash, role, email),
                )
            else:
                cur.execute(
                    f"INSERT INTO {table} (naam, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                    (naam, email, password_hash, role),
                )

        upsert("profiles", "Admin Demo", "admin@werkwise.nl", "admin123", "admin")
        upsert("sales_agents", "Agent Admin", "agent@werkwise.nl", "agent123", "admin")

        cur.execute("INSERT IGNORE INTO system_settings (id) VALUES (1)")
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
