from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is verplicht")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} moet minimaal {min_len} tekens bevatten")
    return value


def require_email(value: Optional[str], field_name: str = "E-mailadres") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} is ongeldig")
    return value.lower()


def require_range(value: float, field_name: str, *, minimum: float, maximum: float) -> float:
    if value < minimum or value > maximum:
        raise ValidationError(f"{field_name} moet tussen {minimum:g} en {maximum:g} liggen")
    return value


def optional_float(value, field_name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        raise ValidationError(f"{field_name} is geen geldig getal")
