"""Durable storage for blocked dates."""
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from calendar_admin.api.database_models import BlockedDate
from calendar_admin.database import create_database_engine, init_database
from calendar_admin.date_validator import date_sort_key


class PersistenceError(Exception):
    """Raised when the durable store cannot complete an operation."""
    pass


class DuplicateDateError(PersistenceError):
    """Raised when the store's primary key rejects an already stored date."""
    pass


class BlockedDateStore:
    """
    Thin wrapper around SQLAlchemy for the blocked_dates table.

    Only three operations are used by the registry: insert, delete and
    a full scan. All methods are blocking and meant to run in a worker thread.
    """

    def __init__(self, database_url: str, timeout_seconds: int = 10):
        """
        Initialize store with database connection.

        Args:
            database_url: SQLAlchemy connection string
            timeout_seconds: Connection/lock wait limit
        """
        self.engine = create_database_engine(database_url, timeout_seconds)
        init_database(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def insert(self, value: str):
        """
        Insert a date.

        Raises:
            DuplicateDateError: If the date is already stored
            PersistenceError: On any other database failure
        """
        try:
            with self.SessionLocal() as db:
                db.add(BlockedDate(date=value))
                db.commit()
        except IntegrityError as e:
            raise DuplicateDateError(f"Date {value} already stored") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to insert {value}") from e

    def delete(self, value: str) -> bool:
        """
        Delete a date.

        Returns:
            True if a row was deleted, False if the date was not stored

        Raises:
            PersistenceError: On database failure
        """
        try:
            with self.SessionLocal() as db:
                result = db.execute(delete(BlockedDate).where(BlockedDate.date == value))
                db.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete {value}") from e

    def list_dates(self) -> List[str]:
        """
        Full scan of stored dates in chronological order.

        Raises:
            PersistenceError: On database failure
        """
        try:
            with self.SessionLocal() as db:
                values = db.execute(select(BlockedDate.date)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load blocked dates") from e

        return sorted(values, key=date_sort_key)

    def close(self):
        """Dispose of all pooled connections."""
        self.engine.dispose()
