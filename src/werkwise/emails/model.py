from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import EmailTemplateType, HoursCheckType, ScheduleType


@dataclass(frozen=True)
class EmailTemplate:
    id: int
    name: str
    type: EmailTemplateType
    subject: str
    body: str
    enabled: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "subject": self.subject,
            "body": self.body,
            "enabled": self.enabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class EmailSchedule:
    id: int
    template_id: int
    schedule_type: ScheduleType
    hour: int
    day_of_week: Optional[int] = None
    target_roles: tuple[str, ...] = ()
    target_users: tuple[int, ...] = ()
    hours_check_type: Optional[HoursCheckType] = None
    minimum_weekly_hours: Optional[float] = None
    minimum_daily_hours: Optional[float] = None
    enabled: bool = True
    template: Optional[EmailTemplate] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "template_id": self.template_id,
            "schedule_type": self.schedule_type.value,
            "day_of_week": self.day_of_week,
            "hour": self.hour,
            "target_roles": list(self.target_roles) or None,
            "target_users": list(self.target_users) or None,
            "hours_check_type": self.hours_check_type.value if self.hours_check_type else None,
            "minimum_weekly_hours": self.minimum_weekly_hours,
            "minimum_daily_hours": self.minimum_daily_hours,
            "enabled": self.enabled,
            "template": self.template.to_dict() if self.template else None,
        }


@dataclass(frozen=True)
class ScheduleFields:
    template_id: int
    schedule_type: ScheduleType
    day_of_week: Optional[int]
    hour: int
    target_roles: Optional[tuple[str, ...]]
    target_users: Optional[tuple[int, ...]]
    hours_check_type: Optional[HoursCheckType]
    minimum_weekly_hours: Optional[float]
    minimum_daily_hours: Optional[float]
    enabled: bool


@dataclass(frozen=True)
class NewEmailLog:
    to_email: str
    subject: str
    body_html: str
    status: str
    template_id: Optional[int] = None
    user_id: Optional[int] = None
    error: Optional[str] = None
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EmailLog:
    id: int
    to_email: str
    subject: str
    body_html: str
    status: str
    template_id: Optional[int] = None
    user_id: Optional[int] = None
    error: Optional[str] = None
    meta: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    template_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "template_id": self.template_id,
            "template_name": self.template_name,
            "user_id": self.user_id,
            "to_email": self.to_email,
            "subject": self.subject,
            "body_html": self.body_html,
            "status": self.status,
            "error": self.error,
            "meta": self.meta,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class SendResult:
    success: bool
    error: Optional[str] = None
