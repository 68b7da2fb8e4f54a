from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import optional_float, require_non_empty
from ..core.enums import EmailTemplateType, HoursCheckType, Role, ScheduleType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.permissions import has_permission
from .model import EmailLog, EmailSchedule, EmailTemplate, ScheduleFields
from .repository import EmailLogRepository, EmailScheduleRepository, EmailTemplateRepository


def _enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Ongeldige waarde voor {field_name}")


def _int_in_range(value, field_name: str, *, minimum: int, maximum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is geen geldig getal")
    if number < minimum or number > maximum:
        raise ValidationError(f"{field_name} moet tussen {minimum} en {maximum} liggen")
    return number


class EmailAdminService:
    """Template and schedule management for the e-mail notifications page."""

    def __init__(
        self,
        *,
        templates: EmailTemplateRepository,
        schedules: EmailScheduleRepository,
        logs: EmailLogRepository,
    ):
        self._templates = templates
        self._schedules = schedules
        self._logs = logs

    @staticmethod
    def _require_manage(current_role: Role) -> None:
        if not has_permission(current_role, "manage_settings"):
            raise AuthorizationError("Geen toegang")

    # Templates

    def list_templates(self, *, current_role: Role) -> Sequence[EmailTemplate]:
        self._require_manage(current_role)
        return self._templates.list_all()

    def _template_fields(self, data: dict, *, template_id: Optional[int] = None) -> dict:
        name = require_non_empty(data.get("name"), "Naam")
        existing = self._templates.get_by_name(name)
        if existing and existing.id != template_id:
            raise ValidationError(f'Er bestaat al een template met de naam "{name}". Kies een andere naam.')
        return {
            "name": name,
            "type": _enum(EmailTemplateType, data.get("type"), "type"),
            "subject": require_non_empty(data.get("subject"), "Onderwerp"),
            "body": require_non_empty(data.get("body"), "Inhoud"),
            "enabled": bool(data.get("enabled", True)),
        }

    def create_template(self, *, current_role: Role, data: dict) -> int:
        self._require_manage(current_role)
        return self._templates.create(**self._template_fields(data))

    def update_template(self, template_id: int, *, current_role: Role, data: dict) -> None:
        self._require_manage(current_role)
        if not self._templates.get_by_id(int(template_id)):
            raise NotFoundError("Template niet gevonden")
        self._templates.update(int(template_id), **self._template_fields(data, template_id=int(template_id)))

    def delete_template(self, template_id: int, *, current_role: Role) -> None:
        self._require_manage(current_role)
        if not self._templates.delete_by_id(int(template_id)):
            raise NotFoundError("Template niet gevonden")

    # Schedules

    def list_schedules(self, *, current_role: Role) -> Sequence[EmailSchedule]:
        self._require_manage(current_role)
        return self._schedules.list_all()

    def get_schedule(self, schedule_id: int, *, current_role: Role) -> EmailSchedule:
        self._require_manage(current_role)
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError("Schema niet gevonden")
        return schedule

    def _schedule_fields(self, data: dict) -> ScheduleFields:
        try:
            template_id = int(data.get("template_id"))
        except (TypeError, ValueError):
            raise ValidationError("Kies een template")
        if not self._templates.get_by_id(template_id):
            raise ValidationError("Template niet gevonden")

        schedule_type = _enum(ScheduleType, data.get("schedule_type") or "weekly", "schema type")
        day_of_week = None
        if schedule_type == ScheduleType.WEEKLY:
            day_of_week = _int_in_range(data.get("day_of_week"), "Dag van de week", minimum=0, maximum=6)
        hour = _int_in_range(data.get("hour"), "Uur", minimum=0, maximum=23)

        target_users = data.get("target_users") or None
        target_roles = data.get("target_roles") or None
        if target_users:
            target_users = tuple(int(u) for u in target_users)
            target_roles = None
        elif target_roles:
            target_roles = tuple(_enum(Role, r, "rol").value for r in target_roles)
        else:
            raise ValidationError("Kies minimaal één rol of gebruiker")

        check_type = _enum(HoursCheckType, data.get("hours_check_type") or "weekly", "controle type")
        weekly = optional_float(data.get("minimum_weekly_hours"), "Minimum uren per week")
        daily = optional_float(data.get("minimum_daily_hours"), "Minimum uren per dag")

        return ScheduleFields(
            template_id=template_id,
            schedule_type=schedule_type,
            day_of_week=day_of_week,
            hour=hour,
            target_roles=target_roles,
            target_users=target_users,
            hours_check_type=check_type,
            minimum_weekly_hours=weekly if check_type == HoursCheckType.WEEKLY else None,
            minimum_daily_hours=daily if check_type == HoursCheckType.DAILY else None,
            enabled=bool(data.get("enabled", True)),
        )

    def create_schedule(self, *, current_role: Role, data: dict) -> int:
        self._require_manage(current_role)
        return self._schedules.create(self._schedule_fields(data))

    def update_schedule(self, schedule_id: int, *, current_role: Role, data: dict) -> None:
        self.get_schedule(schedule_id, current_role=current_role)
        self._schedules.update(int(schedule_id), self._schedule_fields(data))

    def delete_schedule(self, schedule_id: int, *, current_role: Role) -> None:
        self._require_manage(current_role)
        if not self._schedules.delete_by_id(int(schedule_id)):
            raise NotFoundError("Schema niet gevonden")

    # Logs

    def list_logs(self, *, current_role: Role, own_email: str, limit: int = 200) -> Sequence[EmailLog]:
        """Everything for settings managers, otherwise only mail sent to `own_email`."""
        if has_permission(current_role, "manage_settings"):
            return self._logs.list_logs(limit=limit)
        return self._logs.list_logs(to_email=own_email, limit=limit)
