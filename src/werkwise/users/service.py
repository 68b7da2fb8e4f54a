from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_float, require_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..system.service import SettingsService
from .model import Profile, VacationBalance
from .permissions import has_permission
from .repository import ProfileRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    naam: str
    email: str
    role: Role


def _rate(value, field_name: str) -> Optional[float]:
    rate = optional_float(value, field_name)
    if rate is not None and rate < 0:
        raise ValidationError(f"{field_name} mag niet negatief zijn")
    return rate


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionUser:
        profile = self._profiles.get_by_email((email or "").strip().lower())
        if not profile or not profile.is_active:
            raise AuthenticationError("Onjuist e-mailadres of wachtwoord")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Onjuist e-mailadres of wachtwoord")

        return SessionUser(user_id=profile.id, naam=profile.naam, email=profile.email, role=profile.role)


class UserService:
    """Use case: manage employee accounts (admin)."""

    def __init__(self, profiles: ProfileRepository, settings: SettingsService):
        self._profiles = profiles
        self._settings = settings

    def list_users(self, *, current_role: Role) -> Sequence[Profile]:
        if not has_permission(current_role, "view_users"):
            raise AuthorizationError("Geen toegang")
        return self._profiles.list_all()

    def get_user(self, user_id: int) -> Profile:
        profile = self._profiles.get_by_id(int(user_id))
        if not profile:
            raise NotFoundError("Gebruiker niet gevonden")
        return profile

    def create_user(
        self,
        *,
        current_role: Role,
        naam: str,
        email: str,
        password: str,
        role: Role,
        hourly_rate_sale=None,
        hourly_rate_purchase=None,
    ) -> int:
        if not has_permission(current_role, "manage_users"):
            raise AuthorizationError("Geen toegang")

        naam = require_non_empty(naam, "Naam")
        email = require_email(email)
        require_min_length(password, "Wachtwoord", 6)
        rate = _rate(hourly_rate_sale, "Uurtarief")
        purchase_rate = _rate(hourly_rate_purchase, "Inkooptarief")

        if self._profiles.get_by_email(email):
            raise ValidationError("Er bestaat al een gebruiker met dit e-mailadres")

        return self._profiles.create(
            naam=naam,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
            hourly_rate_sale=rate,
            hourly_rate_purchase=purchase_rate,
        )

    def update_hourly_rates(self, *, current_role: Role, user_id: int, data: dict) -> None:
        """Set the sale and/or purchase rate; a rate missing from `data` keeps its stored value."""
        if not has_permission(current_role, "manage_users"):
            raise AuthorizationError("Geen toegang")
        self._settings.require_module("module_hourly_rates")
        profile = self.get_user(user_id)

        sale = profile.hourly_rate_sale
        if "hourly_rate_sale" in data:
            sale = _rate(data["hourly_rate_sale"], "Uurtarief")
        purchase = profile.hourly_rate_purchase
        if "hourly_rate_purchase" in data:
            purchase = _rate(data["hourly_rate_purchase"], "Inkooptarief")
        self._profiles.update_hourly_rates(profile.id, hourly_rate_sale=sale, hourly_rate_purchase=purchase)

    def update_vacation_hours(self, *, current_role: Role, user_id: int, total, used) -> None:
        if not has_permission(current_role, "manage_users"):
            raise AuthorizationError("Geen toegang")
        total_f = optional_float(total, "Vakantie-uren totaal") or 0.0
        used_f = optional_float(used, "Vakantie-uren gebruikt") or 0.0
        if total_f < 0 or used_f < 0:
            raise ValidationError("Vakantie-uren mogen niet negatief zijn")
        self.get_user(user_id)
        self._profiles.update_vacation_hours(int(user_id), total=total_f, used=used_f)

    def delete_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> None:
        if not has_permission(current_role, "manage_users"):
            raise AuthorizationError("Geen toegang")
        if int(current_user_id) == int(user_id):
            raise ValidationError("U kunt uw eigen account niet verwijderen")

        profile = self.get_user(user_id)
        if profile.role == Role.ADMIN and self._profiles.count_by_role(Role.ADMIN) <= 1:
            raise ValidationError("De laatste beheerder kan niet worden verwijderd")

        if not self._profiles.delete_by_id(int(user_id)):
            raise ValidationError("Verwijderen van gebruiker mislukt")

    def vacation_balance(self, user_id: int) -> VacationBalance:
        profile = self.get_user(user_id)
        return VacationBalance(total=profile.vacation_hours_total, used=profile.vacation_hours_used)

    def office_staff(self) -> Sequence[Profile]:
        return [p for p in self._profiles.list_by_roles([Role.ADMIN, Role.KANTOORPERSONEEL]) if p.is_active]

    def find_by_email(self, email: str) -> Optional[Profile]:
        return self._profiles.get_by_email((email or "").strip().lower())
