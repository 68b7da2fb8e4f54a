from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeadStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import Lead, LeadChanges, LeadNote
from .repository import LeadRepository

_SELECT = """
    SELECT l.id, l.company_name, l.contact_email, l.contact_phone, l.website, l.status, l.source,
           l.assigned_to, l.created_by, l.monthly_amount, l.commission_percentage, l.created_at, l.updated_at,
           a.naam AS assigned_agent_naam
    FROM leads l
    LEFT JOIN sales_agents a ON a.id = l.assigned_to
"""


def _to_lead(row: dict) -> Lead:
    return Lead(
        id=int(row["id"]),
        company_name=row["company_name"],
        contact_email=row["contact_email"],
        status=LeadStatus(row["status"]),
        source=row.get("source") or "manual",
        contact_phone=row.get("contact_phone"),
        website=row.get("website"),
        assigned_to=row.get("assigned_to"),
        created_by=row.get("created_by"),
        monthly_amount=optional_float(row.get("monthly_amount")),
        commission_percentage=optional_float(row.get("commission_percentage")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        assigned_agent_naam=row.get("assigned_agent_naam"),
    )


def _to_note(row: dict) -> LeadNote:
    return LeadNote(
        id=int(row["id"]),
        lead_id=int(row["lead_id"]),
        content=row["content"],
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
        agent_naam=row.get("agent_naam"),
    )


class MySQLLeadRepository(LeadRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lead_id: int) -> Optional[Lead]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.id=%s", (lead_id,))
            row = fetchone(cur)
            return _to_lead(row) if row else None

    def list_leads(
        self, *, assigned_to: Optional[int] = None, status: Optional[LeadStatus] = None
    ) -> Sequence[Lead]:
        where: list[str] = []
        params: list = []
        if assigned_to is not None:
            where.append("l.assigned_to=%s")
            params.append(int(assigned_to))
        if status is not None:
            where.append("l.status=%s")
            params.append(status.value)
        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY l.created_at DESC, l.id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_lead(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        company_name: str,
        contact_email: str,
        contact_phone: Optional[str],
        website: Optional[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leads(company_name, contact_email, contact_phone, website, status, source,
                                  assigned_to, created_by)
                VALUES(%s,%s,%s,%s,'new','manual',%s,%s)
                """,
                (company_name, contact_email, contact_phone, website, created_by, created_by),
            )
            return int(cur.lastrowid)

    def update(self, lead_id: int, changes: LeadChanges) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leads
                SET status=%s, assigned_to=%s, monthly_amount=%s, commission_percentage=%s, updated_at=%s
                WHERE id=%s
                """,
                (
                    changes.status.value,
                    changes.assigned_to,
                    changes.monthly_amount,
                    changes.commission_percentage,
                    changes.updated_at,
                    lead_id,
                ),
            )
            return cur.rowcount > 0

    def list_notes(self, lead_id: int) -> Sequence[LeadNote]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT n.id, n.lead_id, n.content, n.created_by, n.created_at, a.naam AS agent_naam
                FROM lead_notes n
                LEFT JOIN sales_agents a ON a.id = n.created_by
                WHERE n.lead_id=%s
                ORDER BY n.created_at DESC, n.id DESC
                """,
                (lead_id,),
            )
            return [_to_note(r) for r in fetchall(cur)]

    def add_note(self, *, lead_id: int, content: str, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO lead_notes(lead_id, content, created_by) VALUES(%s,%s,%s)",
                (lead_id, content, created_by),
            )
            return int(cur.lastrowid)
