from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.auth import init_jwt
from .common.errors import register_error_handlers
from .container import Container, build_container
from .core.constants import TOKEN_EXPIRES_HOURS
from .database.bootstrap import apply_schema, list_tables
from .database.seed import seed_defaults
from .notices.controller import register as register_notices
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Build the API.

    Passing ``container`` skips every database step, which is how the tests
    run the app over in-memory repositories.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    logging.getLogger("school_attendance").setLevel(logging.DEBUG if app.config["DEBUG"] else logging.INFO)

    init_jwt(
        app,
        secret_key=getattr(settings, "JWT_SECRET_KEY"),
        expires_hours=int(getattr(settings, "JWT_ACCESS_TOKEN_HOURS", TOKEN_EXPIRES_HOURS)),
    )
    CORS(app, resources={r"/api/*": {"origins": getattr(settings, "CORS_ORIGINS", "*")}})
    register_error_handlers(app)

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
        container = build_container(db_config=db_config)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_defaults(container)

    app.extensions["container"] = container

    register_users(app, container)
    register_classes(app, container)
    register_attendance(app, container)
    register_notices(app, container)
    register_reports(app, container)

    return app
