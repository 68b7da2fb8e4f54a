from __future__ import annotations

import os
from datetime import datetime

import pytest

os.environ.setdefault("APP_ENV", "testing")


@pytest.fixture
def fixed_now():
    # Wednesday 15 Oct 2025, 09:00
    return datetime(2025, 10, 15, 9, 0, 0)
