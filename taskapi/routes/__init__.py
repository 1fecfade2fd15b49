"""API route blueprints."""

from taskapi.routes.health import create_health_blueprint
from taskapi.routes.tasks import create_tasks_blueprint, parse_task_id


__all__ = ["create_health_blueprint", "create_tasks_blueprint", "parse_task_id"]
