"""Shared repository plumbing over an ``AsyncSession``."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from blog_api.errors.database import DatabaseError, DuplicateEntryError, RecordNotFoundError

type FilterValue = str | int | bool | UUID | datetime | None

UNIQUE_MARKERS = ("unique", "duplicate")


class BaseRepository[ModelT: SQLModel]:
    """
    Lookups, saves and deletes for one table.

    Repositories flush but never commit; the request-scoped session decides
    whether the unit of work is committed or rolled back.

    Attributes:
        model: Table model handled by the repository.
        not_found_message: Detail raised by ``get_or_raise``.
        duplicate_message: Detail raised when a save hits a unique constraint.
    """

    model: type[ModelT]
    not_found_message: str = "Record not found"
    duplicate_message: str = "Record already exists"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, record_id: UUID) -> ModelT | None:
        """
        Load a record by primary key.

        Args:
            record_id: Record UUID

        Returns:
            ModelT | None: The record, or None when it does not exist
        """
        return await self.session.get(self.model, record_id)

    async def get_or_raise(self, record_id: UUID) -> ModelT:
        """
        Load a record by primary key.

        Args:
            record_id: Record UUID

        Returns:
            ModelT: The record

        Raises:
            RecordNotFoundError: If no record has this ID
        """
        record = await self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.not_found_message)
        return record

    async def find_by(self, field_name: str, value: FilterValue) -> ModelT | None:
        """Return the first record whose ``field_name`` equals ``value``."""
        column = getattr(self.model, field_name)
        result = await self.session.execute(select(self.model).where(column == value).limit(1))
        return result.scalar_one_or_none()

    async def exists(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Tell whether another record already holds ``value`` in ``field_name``.

        Args:
            field_name: Column to check
            value: Value to look for
            exclude_id: Record to ignore, so an update does not collide with itself

        Returns:
            bool: True if a matching record exists
        """
        column = getattr(self.model, field_name)
        statement = select(1).where(column == value)
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)  # type: ignore[attr-defined]
        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0

    async def save(self, record: ModelT) -> ModelT:
        """
        Flush a new or modified record and reload server-side values.

        Args:
            record: Record to persist

        Returns:
            ModelT: The refreshed record

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: If the database rejects the write for another reason
        """
        try:
            self.session.add(record)
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            reason = str(e.orig or e).lower()
            if any(marker in reason for marker in UNIQUE_MARKERS):
                raise DuplicateEntryError(self.duplicate_message) from e
            raise DatabaseError(f"Could not save {self.model.__tablename__} record") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Could not save {self.model.__tablename__} record") from e
        await self.session.refresh(record)
        return record

    async def delete(self, record: ModelT) -> None:
        """Delete a loaded record; dependent rows follow through ``ON DELETE CASCADE``."""
        await self.session.delete(record)
        await self.session.flush()

    async def _insert_ignore(self, model: type[SQLModel], values: dict[str, Any]) -> bool:
        """
        Insert a row unless it collides with a unique key.

        Uses ``ON CONFLICT DO NOTHING`` on PostgreSQL and SQLite and a savepoint
        elsewhere, so a collision never aborts the surrounding transaction.

        Args:
            model: Table model to insert into
            values: Column values

        Returns:
            bool: True if a row was inserted, False if it already existed
        """
        # Core inserts skip model-level defaults, so resolve them first.
        row = model.model_validate(values).model_dump(exclude_none=True)
        dialect = self.session.bind.dialect.name if self.session.bind else ""
        if dialect in {"postgresql", "sqlite"}:
            insert = pg_insert if dialect == "postgresql" else sqlite_insert
            statement = insert(model).values(**row).on_conflict_do_nothing()
            result = await self.session.execute(statement)
            return result.rowcount == 1

        try:
            async with self.session.begin_nested():
                self.session.add(model.model_validate(row))
        except IntegrityError:
            return False
        return True
