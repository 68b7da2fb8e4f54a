from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AgentRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import SalesAgent
from .repository import SalesAgentRepository

_COLUMNS = "id, naam, email, password_hash, role, commission_percentage, is_active, created_at"


def _to_agent(row: dict) -> SalesAgent:
    return SalesAgent(
        id=int(row["id"]),
        naam=row["naam"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=AgentRole(row["role"]),
        commission_percentage=as_float(row.get("commission_percentage"), 10.0),
        is_active=bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
    )


class MySQLSalesAgentRepository(SalesAgentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, agent_id: int) -> Optional[SalesAgent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sales_agents WHERE id=%s", (agent_id,))
            row = fetchone(cur)
            return _to_agent(row) if row else None

    def get_by_email(self, email: str) -> Optional[SalesAgent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sales_agents WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_agent(row) if row else None

    def list_all(self, *, active_only: bool = False) -> Sequence[SalesAgent]:
        sql = f"SELECT {_COLUMNS} FROM sales_agents"
        if active_only:
            sql += " WHERE is_active=1"
        sql += " ORDER BY naam"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_agent(r) for r in fetchall(cur)]

    def create(
        self, *, naam: str, email: str, password_hash: str, role: AgentRole, commission_percentage: float
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sales_agents(naam, email, password_hash, role, commission_percentage, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (naam, email, password_hash, role.value, commission_percentage),
            )
            return int(cur.lastrowid)

    def update_commission(self, agent_id: int, commission_percentage: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE sales_agents SET commission_percentage=%s WHERE id=%s", (commission_percentage, agent_id)
            )
            return cur.rowcount > 0

    def set_active(self, agent_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE sales_agents SET is_active=%s WHERE id=%s", (1 if is_active else 0, agent_id))
            return cur.rowcount > 0
