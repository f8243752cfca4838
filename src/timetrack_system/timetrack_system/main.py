from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .organizations.controller import register as register_organizations
from .time_entries.controller import register as register_time_entries
from .working_hours.controller import register as register_working_hours

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    Tests pass a ready ``container`` (in-memory repositories); otherwise one is
    wired against MySQL from the active settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            timezone=getattr(settings, "TIMEZONE", "UTC"),
            sequence_max_retries=int(getattr(settings, "SEQUENCE_MAX_RETRIES", 3)),
            overlap_span_all_days=bool(getattr(settings, "OVERLAP_SPAN_ALL_DAYS", False)),
            lock_timeout_seconds=float(getattr(settings, "LOCK_TIMEOUT_SECONDS", 10)),
        )

    app.extensions["timetrack_container"] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})

    register_organizations(app, container)
    register_working_hours(app, container)
    register_time_entries(app, container)

    return app
