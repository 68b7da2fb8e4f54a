"""Run the hourly e-mail job from cron without going through HTTP.

    python scripts/send_scheduled_emails.py
    python scripts/send_scheduled_emails.py --test --schedule-id 3 --to jan@example.nl
"""
from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from werkwise.common.datetime_utils import now_local
from werkwise.common.log import configure_logging
from werkwise.container import build_container
from werkwise.settings import get_settings_module


def main() -> None:
    parser = argparse.ArgumentParser(description="Send scheduled Werkwise e-mails")
    parser.add_argument("--test", action="store_true", help="test mode (one schedule, one recipient)")
    parser.add_argument("--schedule-id", type=int)
    parser.add_argument("--to", dest="test_recipient")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        app_url=settings.APP_URL,
        postmark_token=settings.POSTMARK_SERVER_TOKEN,
        from_email=settings.POSTMARK_FROM_EMAIL,
    )
    summary = container.scheduled_email_dispatcher.run(
        test_mode=args.test,
        schedule_id=args.schedule_id,
        test_recipient=args.test_recipient,
        now=now_local(),
    )
    print(json.dumps(summary, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
