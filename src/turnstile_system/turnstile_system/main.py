from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .audit.controller import register as register_audit
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_MAX_UPLOAD_MB
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .punches.controller import register as register_punches
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB)) * 1024 * 1024

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if app.config["DEBUG"]:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_admin_user(
                db_config,
                username=getattr(settings, "ADMIN_USERNAME", "admin"),
                password=getattr(settings, "ADMIN_PASSWORD", "admin123"),
            )

        container = build_container(
            db_config=db_config,
            single_policy=getattr(settings, "SINGLE_DEVICE_POLICY", "single_device"),
            consolidated_policy=getattr(settings, "CONSOLIDATED_POLICY", "consolidated"),
        )

    register_error_handlers(app)
    register_audit(app, container)
    register_users(app, container)
    register_punches(app, container)

    return app
