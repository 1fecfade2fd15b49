"""Marshmallow schemas for serialization and validation."""

from taskapi.schemas.task import TaskPayloadSchema, TaskSchema, utcnow


__all__ = ["TaskSchema", "TaskPayloadSchema", "utcnow"]
