"""Task persistence on top of a SQLAlchemy engine."""

import logging
from datetime import datetime

from sqlalchemy import Engine, delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from taskapi.errors import PersistenceError, TaskNotFoundError
from taskapi.models import Task


logger = logging.getLogger(__name__)


class TaskStore:
    """Executes one statement per operation against the ``tasks`` table.

    Returned ``Task`` instances are detached from their session, so they can
    be serialized after the transaction commits.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def insert(self, task: Task) -> Task:
        """Insert a new task and return it with the store-assigned id."""
        try:
            with self._session_factory.begin() as session:
                session.add(task)
        except SQLAlchemyError as err:
            logger.exception("Database error while inserting task")
            raise PersistenceError() from err
        return task

    def get(self, task_id: int) -> Task:
        """Fetch one task.

        Raises:
            TaskNotFoundError: If no row has this id.
            PersistenceError: On any store failure.
        """
        try:
            with self._session_factory() as session:
                task = session.get(Task, task_id)
        except SQLAlchemyError as err:
            logger.exception(f"Database error while fetching task {task_id}")
            raise PersistenceError() from err

        if task is None:
            raise TaskNotFoundError()
        return task

    def list_all(self) -> list[Task]:
        try:
            with self._session_factory() as session:
                return list(session.scalars(select(Task)))
        except SQLAlchemyError as err:
            logger.exception("Database error while listing tasks")
            raise PersistenceError() from err

    def update(
        self,
        task_id: int,
        *,
        title: str,
        description: str,
        due_date: datetime,
        updated_at: datetime,
    ) -> Task:
        """Replace the mutable fields of a task and return the stored row.

        ``id`` and ``created_at`` are never written.

        Raises:
            TaskNotFoundError: If no row has this id.
            PersistenceError: On any store failure.
        """
        statement = (
            update(Task)
            .where(Task.id == task_id)
            .values(
                title=title,
                description=description,
                due_date=due_date,
                updated_at=updated_at,
            )
            .returning(Task)
        )
        try:
            with self._session_factory.begin() as session:
                task = session.scalars(statement).one_or_none()
        except SQLAlchemyError as err:
            logger.exception(f"Database error while updating task {task_id}")
            raise PersistenceError() from err

        if task is None:
            raise TaskNotFoundError()
        return task

    def delete(self, task_id: int) -> None:
        """Hard-delete a task.

        Raises:
            TaskNotFoundError: If no row was affected.
            PersistenceError: On any store failure.
        """
        statement = (
            delete(Task)
            .where(Task.id == task_id)
            .execution_options(synchronize_session=False)
        )
        try:
            with self._session_factory.begin() as session:
                deleted = session.execute(statement).rowcount
        except SQLAlchemyError as err:
            logger.exception(f"Database error while deleting task {task_id}")
            raise PersistenceError() from err

        if deleted == 0:
            raise TaskNotFoundError()

    def ping(self) -> None:
        """Round-trip `SELECT 1`; raises ``SQLAlchemyError`` if the store is unreachable."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
