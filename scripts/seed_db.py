"""Fill the database with demo data (users, projects, stock, registrations).

Every step runs on its own; failures are listed at the end instead of aborting.
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from werkwise.common.datetime_utils import now_local
from werkwise.common.log import configure_logging
from werkwise.container import build_container
from werkwise.database.bootstrap import ensure_demo_users
from werkwise.settings import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config)
    container = build_container(db_config=db_config)
    result = container.demo_seeder.run(today=now_local().date())

    for line in result.success:
        print(f"OK: {line}")
    for line in result.errors:
        print(f"FOUT: {line}")

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    if result.errors:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
