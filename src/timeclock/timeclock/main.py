from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .incidents.controller import register as register_incidents
from .notifications.controller import register as register_notifications
from .notifications.delivery import VapidConfig
from .notifications.scheduler import start_scheduler
from .restaurants.controller import register as register_restaurants
from .schedules.controller import register as register_schedules
from .timeclocks.controller import register as register_timeclocks

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    time_zone = getattr(settings, "TIME_ZONE")
    container = build_container(
        db_config=db_config,
        time_zone=time_zone,
        lead_minutes=getattr(settings, "REMINDER_LEAD_MINUTES"),
        lookback_minutes=getattr(settings, "REMINDER_LOOKBACK_MINUTES"),
        vapid=VapidConfig(
            public_key=getattr(settings, "VAPID_PUBLIC_KEY", ""),
            private_key=getattr(settings, "VAPID_PRIVATE_KEY", ""),
            subject=getattr(settings, "VAPID_SUBJECT", "mailto:admin@timeclock.app"),
        ),
        cron_secret=getattr(settings, "CRON_SECRET", ""),
        admin_username=getattr(settings, "ADMIN_USERNAME", "admin"),
        admin_password=getattr(settings, "ADMIN_PASSWORD", ""),
    )
    if not container.push_subscription_service.public_key:
        logger.warning("VAPID keys not configured; push reminders will not be delivered")

    register_error_handlers(app)
    register_restaurants(app, container)
    register_employees(app, container)
    register_schedules(app, container)
    register_timeclocks(app, container)
    register_incidents(app, container)
    register_notifications(app, container)

    start_scheduler(
        container.notification_engine,
        enabled=bool(getattr(settings, "ENABLE_SCHEDULER", False)),
        time_zone=time_zone,
    )

    return app
