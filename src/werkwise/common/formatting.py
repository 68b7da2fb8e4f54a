from __future__ import annotations

from typing import Any


def format_number(value: Any) -> str:
    """Numbers as a browser prints them: 8.0 -> "8", 7.5 -> "7.5"."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
