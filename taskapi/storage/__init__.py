"""Storage gateway and task persistence."""

from taskapi.storage.gateway import ConnectionInfo, connect, ensure_schema, open_store
from taskapi.storage.task_store import TaskStore


__all__ = ["ConnectionInfo", "connect", "ensure_schema", "open_store", "TaskStore"]
