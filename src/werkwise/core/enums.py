from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Rol van een medewerker (profiel) voor autorisatie."""

    ADMIN = "admin"
    KANTOORPERSONEEL = "kantoorpersoneel"
    MEDEWERKER = "medewerker"
    ZZPER = "zzper"
    SUPERUSER = "superuser"


OFFICE_ROLES = frozenset({Role.ADMIN, Role.KANTOORPERSONEEL})


class AgentRole(str, Enum):
    """Rol binnen het agent-portaal (los van de medewerker-rollen)."""

    ADMIN = "admin"
    SALES = "sales"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    IN_PROGRESS = "in_progress"
    CONVERTED = "converted"
    PAID = "paid"
    LOST = "lost"


class ProjectStatus(str, Enum):
    ACTIEF = "actief"
    VOLTOOID = "voltooid"
    GEPAUZEERD = "gepauzeerd"


class RegistrationStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class VacationType(str, Enum):
    VAKANTIE = "vakantie"
    ZIEKTE = "ziekte"
    VERLOF = "verlof"
    ANDERS = "anders"


class RequestStatus(str, Enum):
    """Status van een aanvraag (vakantie/afwezigheid)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    TIME_REGISTRATION_SUBMITTED = "time_registration_submitted"
    MISSING_HOURS_REMINDER = "missing_hours_reminder"
    SYSTEM_ALERT = "system_alert"
    USER_INACTIVE = "user_inactive"
    USER_ACTIVE = "user_active"


class NotificationStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    ARCHIVED = "archived"


class TransactionType(str, Enum):
    IN = "in"
    OUT = "out"


class EmailTemplateType(str, Enum):
    MISSING_HOURS = "missing_hours"
    WEEKLY_OVERVIEW = "weekly_overview"


class ScheduleType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class HoursCheckType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class DamageItemType(str, Enum):
    GEREEDSCHAP = "gereedschap"
    MATERIAAL = "materiaal"
    BUS = "bus"


class DamageStatus(str, Enum):
    GEMELD = "gemeld"
    IN_BEHANDELING = "in-behandeling"
    OPGELOST = "opgelost"
