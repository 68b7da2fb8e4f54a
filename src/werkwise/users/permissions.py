"""Role to permission matrix for employee accounts."""
from __future__ import annotations

from ..core.enums import Role

_OFFICE = frozenset(
    {
        "view_dashboard",
        "manage_projects",
        "manage_inventory",
        "manage_tools",
        "manage_returns",
        "view_reports",
        "manage_damage_reports",
        "view_damage_reports",
        "register_hours",
        "view_notifications",
        "approve_hours",
        "manage_notifications",
        "export_data",
        "view_projects",
        "view_inventory",
        "view_tools",
        "create_tickets",
        "view_users",
        "approve_vacation",
    }
)

_ADMIN = _OFFICE | {"manage_users", "manage_settings", "view_settings"}

_FIELD = frozenset(
    {
        "view_dashboard",
        "register_hours",
        "view_notifications",
        "view_damage_reports",
        "manage_damage_reports",
        "view_own_reports",
    }
)

ROLE_PERMISSIONS: dict[Role, frozenset] = {
    Role.ADMIN: frozenset(_ADMIN),
    Role.SUPERUSER: frozenset(_ADMIN | {"view_all_tickets"}),
    Role.KANTOORPERSONEEL: _OFFICE,
    Role.MEDEWERKER: _FIELD,
    Role.ZZPER: _FIELD,
}


def has_permission(role: Role | str | None, permission: str) -> bool:
    if role is None:
        return False
    try:
        role = Role(role)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def is_office_or_superuser(role: Role | str | None) -> bool:
    return has_permission(role, "approve_hours")
