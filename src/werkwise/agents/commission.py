"""Commission tiers for sales agents, keyed on the number of paid leads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.constants import LEAD_VALUE


@dataclass(frozen=True)
class CommissionLevel:
    name: str
    percentage: int
    level: int
    next_at: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "percentage": self.percentage, "level": self.level, "next_at": self.next_at}


# (minimum paid leads, level), highest first.
TIERS = (
    (50, CommissionLevel("Diamond", 40, 5, 0)),
    (10, CommissionLevel("Gold", 30, 4, 50)),
    (5, CommissionLevel("Silver", 20, 3, 10)),
    (1, CommissionLevel("Bronze", 10, 2, 5)),
)
STARTER = CommissionLevel("Starter", 10, 1, 1)


def commission_level(paid_leads: int) -> CommissionLevel:
    for minimum, level in TIERS:
        if paid_leads >= minimum:
            return level
    return STARTER


def earnings(lead_count: int, level: CommissionLevel) -> float:
    return lead_count * LEAD_VALUE * (level.percentage / 100)


def leads_to_next_level(paid_leads: int) -> int:
    return max(0, commission_level(paid_leads).next_at - paid_leads)


def commission_preview(monthly_amount, commission_percentage) -> float | None:
    """Monthly commission for a lead; None while either input is missing."""
    if not monthly_amount or not commission_percentage:
        return None
    return round(float(monthly_amount) * float(commission_percentage) / 100, 2)
