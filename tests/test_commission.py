from __future__ import annotations

import pytest

from werkwise.agents.commission import commission_level, commission_preview, earnings, leads_to_next_level


@pytest.mark.parametrize(
    "paid, name, pct",
    [
        (0, "Starter", 10),
        (1, "Bronze", 10),
        (4, "Bronze", 10),
        (5, "Silver", 20),
        (10, "Gold", 30),
        (49, "Gold", 30),
        (50, "Diamond", 40),
    ],
)
def test_commission_level_tiers(paid, name, pct):
    level = commission_level(paid)
    assert level.name == name
    assert level.percentage == pct


def test_earnings_use_lead_value_and_percentage():
    assert earnings(3, commission_level(3)) == pytest.approx(90.0)
    assert earnings(12, commission_level(12)) == pytest.approx(1080.0)


def test_leads_to_next_level():
    assert leads_to_next_level(0) == 1
    assert leads_to_next_level(3) == 2
    assert leads_to_next_level(60) == 0


def test_commission_preview():
    assert commission_preview(1000, 15) == 150.0
    assert commission_preview("249.99", "10") == 25.0
    assert commission_preview(None, 10) is None
    assert commission_preview(500, None) is None
