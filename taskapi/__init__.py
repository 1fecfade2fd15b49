"""Flask application factory with OpenTelemetry instrumentation."""

import logging

from flask import Flask

from taskapi.telemetry import telemetry_enabled


def create_app(config_class: type | None = None, store=None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to Config.
        store: TaskStore to serve from. Opened from the configuration
            when omitted.

    Returns:
        Configured Flask application instance.

    Raises:
        StoreConnectionError: If no store was given and the configured
            database cannot be reached.
    """
    # Initialize telemetry BEFORE the store engine is created
    if telemetry_enabled():
        from taskapi.telemetry import get_otel_log_handler, instrument_flask_app, setup_telemetry

        setup_telemetry()

    app = Flask(__name__)

    if telemetry_enabled():
        instrument_flask_app(app)

    # Load configuration
    if config_class is None:
        from taskapi.config import Config

        config_class = Config
    app.config.from_object(config_class)

    if store is None:
        from taskapi.storage import open_store

        store = open_store(
            database_target(app.config),
            **app.config["SQLALCHEMY_ENGINE_OPTIONS"],
        )
    app.extensions["task_store"] = store

    # Register metrics middleware ahead of the blueprints so its timer starts first
    if telemetry_enabled():
        from taskapi.middleware import register_metrics_middleware

        register_metrics_middleware(app)

    # Register blueprints
    from taskapi.routes import create_health_blueprint, create_tasks_blueprint

    app.register_blueprint(create_health_blueprint(store))
    app.register_blueprint(create_tasks_blueprint(store))

    # Register error handlers
    from taskapi.errors import register_error_handlers

    register_error_handlers(app)

    # Attach OTel log handler after app setup
    if telemetry_enabled():
        handler = get_otel_log_handler()
        if handler:
            root_logger = logging.getLogger()
            if handler not in root_logger.handlers:
                root_logger.addHandler(handler)

    _configure_logging()

    return app


def database_target(config, password: str | None = None):
    """Resolve where the store lives from configuration.

    Args:
        config: Mapping with the ``DATABASE_URL`` and ``DB_*`` settings.
        password: Overrides ``DB_PASSWORD`` when given.

    Returns:
        ``DATABASE_URL`` if set, otherwise a ConnectionInfo.
    """
    from taskapi.storage import ConnectionInfo

    if config.get("DATABASE_URL"):
        return config["DATABASE_URL"]

    return ConnectionInfo(
        host=config["DB_HOST"],
        port=config["DB_PORT"],
        user=config["DB_USER"],
        dbname=config["DB_NAME"],
        sslmode=config["DB_SSLMODE"],
        password=password if password is not None else (config.get("DB_PASSWORD") or ""),
    )


def _configure_logging() -> None:
    """Configure logging for the application."""
    # App loggers - propagate to root (where OTel handler is)
    logging.getLogger("taskapi").setLevel(logging.DEBUG)
    logging.getLogger("taskapi").propagate = True

    # Reduce noise from framework loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    # SQLAlchemy engine logs can be noisy
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
