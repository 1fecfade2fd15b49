"""Database models."""

from taskapi.models.task import Base, Task, UTCDateTime


__all__ = ["Base", "Task", "UTCDateTime"]
