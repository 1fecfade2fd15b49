"""Health check endpoint."""

import logging
from typing import Any

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from taskapi.storage import TaskStore
from taskapi.telemetry import SERVICE_NAME, SERVICE_VERSION


logger = logging.getLogger(__name__)


def create_health_blueprint(store: TaskStore) -> Blueprint:
    """Build the health blueprint probing ``store``."""
    health_bp = Blueprint("health", __name__)

    @health_bp.route("/health", methods=["GET"])
    def health_check():
        """Health check endpoint for monitoring.

        Returns:
            JSON response with health status of the database.
        """
        health_status: dict[str, Any] = {
            "status": "healthy",
            "components": {
                "database": "healthy",
            },
            "service": {
                "name": SERVICE_NAME,
                "version": SERVICE_VERSION,
            },
        }

        try:
            store.ping()
        except SQLAlchemyError:
            logger.warning("Health check: database ping failed", exc_info=True)
            health_status["status"] = "unhealthy"
            health_status["components"]["database"] = "unhealthy"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return jsonify(health_status), status_code

    return health_bp
