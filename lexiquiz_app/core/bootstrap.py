"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging

from flask import Flask

from ..extensions import db
from .error_handlers import register_error_handlers
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure the package logger and the Flask app logger."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
    )

    if app.logger.handlers:
        return

    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    register_error_handlers(app)


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def initialize_database(app: Flask) -> None:
    """Create database tables and ensure an active SRS config exists."""

    from ..models import SrsConfigRecord
    from ..modules.srs.schemas import DEFAULT_SRS_CONFIG

    db.create_all()

    if SrsConfigRecord.query.filter_by(is_active=True).first() is None:
        db.session.add(SrsConfigRecord(
            version=DEFAULT_SRS_CONFIG.version,
            ease_min=DEFAULT_SRS_CONFIG.ease_min,
            ease_max=DEFAULT_SRS_CONFIG.ease_max,
            incorrect_ease_penalty=DEFAULT_SRS_CONFIG.incorrect_ease_penalty,
            is_active=True,
        ))
        db.session.commit()
        app.logger.info("Seeded default SRS config %s.", DEFAULT_SRS_CONFIG.version)
