"""Task CRUD endpoints."""

import logging
import re
from typing import Any

from flask import Blueprint, abort, jsonify, request
from flask.views import MethodView
from marshmallow import ValidationError

from taskapi.errors import (
    MalformedRequestError,
    PersistenceError,
    TaskNotFoundError,
    TaskValidationError,
)
from taskapi.models import Task
from taskapi.schemas import TaskPayloadSchema, TaskSchema, utcnow
from taskapi.storage import TaskStore
from taskapi.telemetry import get_meter, get_tracer


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)

tasks_created = meter.create_counter(
    name="tasks.created",
    description="Tasks created",
    unit="1",
)

tasks_deleted = meter.create_counter(
    name="tasks.deleted",
    description="Tasks deleted",
    unit="1",
)

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

# Upper bound of a SERIAL column
MAX_TASK_ID = 2**31 - 1

_TASK_ID_PATTERN = re.compile(r"[0-9]+")


def parse_task_id(raw: str) -> int:
    """Parse the id segment of a task path.

    Args:
        raw: Path segment following ``/tasks/``.

    Returns:
        Task id as an integer.

    Raises:
        TaskValidationError: If the segment is not a non-negative integer in range.
    """
    if not _TASK_ID_PATTERN.fullmatch(raw):
        raise TaskValidationError(
            "Invalid ID format", details={"id": [f"Not a valid ID: {raw!r}."]}
        )

    task_id = int(raw)
    if task_id > MAX_TASK_ID:
        raise TaskValidationError("Invalid ID format", details={"id": ["ID is out of range."]})
    return task_id


def load_task_payload() -> dict[str, Any]:
    """Decode and validate the request body as a task payload.

    Raises:
        MalformedRequestError: If the body is not valid JSON.
        TaskValidationError: If the payload fails schema validation.
    """
    body = request.get_json(force=True, silent=True)
    if body is None:
        raise MalformedRequestError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise MalformedRequestError("Request body must be a JSON object")

    try:
        return TaskPayloadSchema().load(body)
    except ValidationError as err:
        raise TaskValidationError(details=err.messages) from err


def reject_unsupported_methods() -> None:
    """Answer 405 for methods the service never handles, on any path."""
    if request.method not in SUPPORTED_METHODS:
        abort(405)


class TaskCollectionAPI(MethodView):
    """``/tasks``: list and create."""

    init_every_request = False

    def __init__(self, store: TaskStore):
        self.store = store

    def get(self):
        tasks = self.store.list_all()
        return jsonify(TaskSchema(many=True).dump(tasks))

    def post(self):
        with tracer.start_as_current_span("task.create") as span:
            data = load_task_payload()

            now = utcnow()
            task = Task(
                title=data["title"],
                description=data["description"],
                due_date=data["due_date"],
                created_at=now,
                updated_at=now,
            )
            task = self.store.insert(task)

            span.set_attribute("task.id", task.id)
            tasks_created.add(1)
            logger.info(f"Task created: {task.id}", extra={"task_id": task.id})

            return jsonify(TaskSchema().dump(task)), 201


class TaskItemAPI(MethodView):
    """``/tasks/<id>``: fetch, replace and delete."""

    init_every_request = False

    def __init__(self, store: TaskStore):
        self.store = store

    def get(self, task_id: str):
        task = self.store.get(parse_task_id(task_id))
        return jsonify(TaskSchema().dump(task))

    def put(self, task_id: str):
        with tracer.start_as_current_span("task.update") as span:
            task_id = parse_task_id(task_id)
            span.set_attribute("task.id", task_id)

            data = load_task_payload()
            task = self.store.update(
                task_id,
                title=data["title"],
                description=data["description"],
                due_date=data["due_date"],
                updated_at=utcnow(),
            )

            logger.info(f"Task updated: {task_id}", extra={"task_id": task_id})

            return jsonify(TaskSchema().dump(task))

    def delete(self, task_id: str):
        with tracer.start_as_current_span("task.delete") as span:
            task_id = parse_task_id(task_id)
            span.set_attribute("task.id", task_id)

            try:
                self.store.delete(task_id)
            except PersistenceError as err:
                # Clients cannot tell a failed delete from a missing task
                raise TaskNotFoundError() from err

            tasks_deleted.add(1)
            logger.info(f"Task deleted: {task_id}", extra={"task_id": task_id})

            return "", 204


def create_tasks_blueprint(store: TaskStore) -> Blueprint:
    """Build the tasks blueprint with its views bound to ``store``.

    Args:
        store: Task store shared by every request.

    Returns:
        Blueprint mounted at ``/tasks``.
    """
    tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")

    tasks_bp.add_url_rule("", view_func=TaskCollectionAPI.as_view("collection", store))
    tasks_bp.add_url_rule("/<task_id>", view_func=TaskItemAPI.as_view("item", store))
    tasks_bp.before_app_request(reject_unsupported_methods)

    return tasks_bp
