from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .alerts.controller import register as register_alerts
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.exceptions import RemoteServiceError
from .database.bootstrap import apply_schema, ensure_default_settings, ensure_demo_users, list_tables
from .reports.controller import register as register_reports
from .scanning.controller import register as register_scanning
from .settings.controller import register as register_settings
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; pass a ready container to skip database setup."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["REFRESH_INTERVAL_SECONDS"] = int(getattr(settings, "REFRESH_INTERVAL_SECONDS", 30))

    if container is None:
        container = _container_from_settings(settings, settings_module)

    app.extensions["safepass"] = container
    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_scanning(app, container)
    register_alerts(app, container)
    register_reports(app, container)
    register_settings(app, container)

    @app.route("/api/health", endpoint="health")
    def health():
        return {"success": True, "loaded": container.state.loaded}

    try:
        container.state.refresh()
    except RemoteServiceError as e:
        # views load lazily; the refresher keeps retrying
        logger.warning("Initial data load failed: %s", e)
    container.refresher.start()

    return app


def _container_from_settings(settings, settings_module: str) -> Container:
    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    container = build_container(
        db_config=db_config,
        functions_url=getattr(settings, "FUNCTIONS_URL"),
        functions_key=getattr(settings, "FUNCTIONS_KEY", ""),
        functions_timeout=float(getattr(settings, "FUNCTIONS_TIMEOUT", 10)),
        locations=getattr(settings, "SCAN_LOCATIONS"),
        demo_login_enabled=bool(getattr(settings, "DEMO_LOGIN_ENABLED", False)),
        refresh_interval_seconds=float(getattr(settings, "REFRESH_INTERVAL_SECONDS", 30)),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(container.conn, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_default_settings(container.conn)
        ensure_demo_users(container.conn)
        logger.info("Default settings and demo accounts ready")

    return container

