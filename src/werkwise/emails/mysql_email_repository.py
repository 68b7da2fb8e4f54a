from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmailTemplateType, HoursCheckType, ScheduleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, optional_float
from .model import EmailLog, EmailSchedule, EmailTemplate, NewEmailLog, ScheduleFields
from .repository import EmailLogRepository, EmailScheduleRepository, EmailTemplateRepository

_TEMPLATE_COLUMNS = "id, name, type, subject, body, enabled, created_at"

_SCHEDULE_SELECT = """
    SELECT s.id, s.template_id, s.schedule_type, s.day_of_week, s.hour, s.target_roles, s.target_users,
           s.hours_check_type, s.minimum_weekly_hours, s.minimum_daily_hours, s.enabled,
           t.name AS t_name, t.type AS t_type, t.subject AS t_subject, t.body AS t_body,
           t.enabled AS t_enabled, t.created_at AS t_created_at
    FROM email_schedules s
    LEFT JOIN email_templates t ON t.id = s.template_id
"""


def _to_template(row: dict) -> EmailTemplate:
    return EmailTemplate(
        id=int(row["id"]),
        name=row["name"],
        type=EmailTemplateType(row["type"]),
        subject=row["subject"],
        body=row["body"],
        enabled=bool(row.get("enabled", 1)),
        created_at=row.get("created_at"),
    )


def _to_schedule(row: dict) -> EmailSchedule:
    template = None
    if row.get("t_name") is not None:
        template = EmailTemplate(
            id=int(row["template_id"]),
            name=row["t_name"],
            type=EmailTemplateType(row["t_type"]),
            subject=row["t_subject"],
            body=row["t_body"],
            enabled=bool(row["t_enabled"]),
            created_at=row.get("t_created_at"),
        )
    check = row.get("hours_check_type")
    return EmailSchedule(
        id=int(row["id"]),
        template_id=int(row["template_id"]),
        schedule_type=ScheduleType(row["schedule_type"]),
        day_of_week=row.get("day_of_week"),
        hour=int(row["hour"]),
        target_roles=tuple(load_json(row.get("target_roles"), []) or ()),
        target_users=tuple(int(u) for u in (load_json(row.get("target_users"), []) or ())),
        hours_check_type=HoursCheckType(check) if check else None,
        minimum_weekly_hours=optional_float(row.get("minimum_weekly_hours")),
        minimum_daily_hours=optional_float(row.get("minimum_daily_hours")),
        enabled=bool(row.get("enabled", 1)),
        template=template,
    )


def _to_log(row: dict) -> EmailLog:
    return EmailLog(
        id=int(row["id"]),
        to_email=row["to_email"],
        subject=row["subject"],
        body_html=row["body_html"],
        status=row["status"],
        template_id=row.get("template_id"),
        user_id=row.get("user_id"),
        error=row.get("error"),
        meta=load_json(row.get("meta")),
        created_at=row.get("created_at"),
        template_name=row.get("template_name"),
    )


def _schedule_params(fields: ScheduleFields) -> tuple:
    return (
        fields.template_id,
        fields.schedule_type.value,
        fields.day_of_week,
        fields.hour,
        dump_json(list(fields.target_roles)) if fields.target_roles is not None else None,
        dump_json(list(fields.target_users)) if fields.target_users is not None else None,
        fields.hours_check_type.value if fields.hours_check_type else None,
        fields.minimum_weekly_hours,
        fields.minimum_daily_hours,
        1 if fields.enabled else 0,
    )


class MySQLEmailTemplateRepository(EmailTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, template_id: int) -> Optional[EmailTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEMPLATE_COLUMNS} FROM email_templates WHERE id=%s", (template_id,))
            row = fetchone(cur)
            return _to_template(row) if row else None

    def get_by_name(self, name: str) -> Optional[EmailTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEMPLATE_COLUMNS} FROM email_templates WHERE name=%s", (name,))
            row = fetchone(cur)
            return _to_template(row) if row else None

    def list_all(self) -> Sequence[EmailTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEMPLATE_COLUMNS} FROM email_templates ORDER BY name")
            return [_to_template(r) for r in fetchall(cur)]

    def create(self, *, name: str, type: EmailTemplateType, subject: str, body: str, enabled: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO email_templates(name, type, subject, body, enabled) VALUES(%s,%s,%s,%s,%s)",
                (name, type.value, subject, body, 1 if enabled else 0),
            )
            return int(cur.lastrowid)

    def update(
        self, template_id: int, *, name: str, type: EmailTemplateType, subject: str, body: str, enabled: bool
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE email_templates SET name=%s, type=%s, subject=%s, body=%s, enabled=%s WHERE id=%s",
                (name, type.value, subject, body, 1 if enabled else 0, template_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, template_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM email_templates WHERE id=%s", (template_id,))
            return cur.rowcount > 0


class MySQLEmailScheduleRepository(EmailScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[EmailSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SCHEDULE_SELECT + " WHERE s.id=%s", (schedule_id,))
            row = fetchone(cur)
            return _to_schedule(row) if row else None

    def list_all(self) -> Sequence[EmailSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SCHEDULE_SELECT + " ORDER BY s.day_of_week, s.hour, s.id")
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_enabled_at_hour(self, hour: int) -> Sequence[EmailSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SCHEDULE_SELECT + " WHERE s.enabled=1 AND s.hour=%s ORDER BY s.id", (hour,))
            return [_to_schedule(r) for r in fetchall(cur)]

    def create(self, fields: ScheduleFields) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO email_schedules(template_id, schedule_type, day_of_week, hour, target_roles,
                                            target_users, hours_check_type, minimum_weekly_hours,
                                            minimum_daily_hours, enabled)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _schedule_params(fields),
            )
            return int(cur.lastrowid)

    def update(self, schedule_id: int, fields: ScheduleFields) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE email_schedules
                SET template_id=%s, schedule_type=%s, day_of_week=%s, hour=%s, target_roles=%s,
                    target_users=%s, hours_check_type=%s, minimum_weekly_hours=%s,
                    minimum_daily_hours=%s, enabled=%s
                WHERE id=%s
                """,
                (*_schedule_params(fields), schedule_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM email_schedules WHERE id=%s", (schedule_id,))
            return cur.rowcount > 0


class MySQLEmailLogRepository(EmailLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, log: NewEmailLog) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO email_logs(template_id, user_id, to_email, subject, body_html, status, error, meta)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    log.template_id,
                    log.user_id,
                    log.to_email,
                    log.subject,
                    log.body_html,
                    log.status,
                    log.error,
                    dump_json(log.meta),
                ),
            )
            return int(cur.lastrowid)

    def list_logs(self, *, to_email: Optional[str] = None, limit: int = 200) -> Sequence[EmailLog]:
        sql = """
            SELECT l.id, l.template_id, l.user_id, l.to_email, l.subject, l.body_html, l.status, l.error,
                   l.meta, l.created_at, t.name AS template_name
            FROM email_logs l
            LEFT JOIN email_templates t ON t.id = l.template_id
        """
        params: list = []
        if to_email:
            sql += " WHERE l.to_email=%s"
            params.append(to_email)
        sql += " ORDER BY l.created_at DESC, l.id DESC LIMIT %s"
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_log(r) for r in fetchall(cur)]
