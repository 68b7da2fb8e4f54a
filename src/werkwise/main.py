from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .agents.controller import register as register_agents
from .common.datetime_utils import now_local
from .common.log import configure_logging
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_APP_URL
from .damage.controller import register as register_damage
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .emails.controller import register as register_emails
from .exports.controller import register as register_exports
from .finance.controller import register as register_finance
from .inventory.controller import register as register_inventory
from .invoicing.controller import register as register_invoicing
from .notifications.controller import register as register_notifications
from .projects.controller import register as register_projects
from .registrations.controller import register as register_registrations
from .settings import get_settings_module
from .system.controller import register as register_system
from .users.controller import register as register_users
from .vacation.controller import register as register_vacation

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["FUNCTIONS_TOKEN"] = getattr(settings, "FUNCTIONS_TOKEN", "")
    app.config["APP_URL"] = getattr(settings, "APP_URL", DEFAULT_APP_URL)

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            app_url=app.config["APP_URL"],
            postmark_token=getattr(settings, "POSTMARK_SERVER_TOKEN", ""),
            from_email=getattr(settings, "POSTMARK_FROM_EMAIL", "noreply@werkwise.nl"),
        )

        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_users(db_config)
            result = container.demo_seeder.run(today=now_local().date())
            logger.info("Demo seed ready (%s steps, %s errors)", len(result.success), len(result.errors))

    app.extensions["werkwise"] = container

    register_users(app, container)
    register_projects(app, container)
    register_registrations(app, container)
    register_inventory(app, container)
    register_vacation(app, container)
    register_notifications(app, container)
    register_system(app, container)
    register_exports(app, container)
    register_invoicing(app, container)
    register_agents(app, container)
    register_emails(app, container)
    register_damage(app, container)
    register_finance(app, container)
    register_error_handlers(app)

    return app


def run() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"])


if __name__ == "__main__":
    run()
