"""Generic SQLAlchemy implementation of LifecycleRepository.

Every mutating operation is one statement on the caller's AsyncSession; the
surrounding session.begin() block (see database.get_session) is the
transaction boundary.

  - persist() on an existing entity is UPDATE ... WHERE id = :id AND
    version = :version, bumping version in the same statement; rowcount 0
    means the caller's version is stale (or the row is gone).
  - mark_deleted() / clear_deleted() are UPDATE ... WHERE deleted_at IS
    [NOT] NULL, so concurrent transitions cannot both succeed.
  - Core-style UPDATE/DELETE bypass the identity map
    (synchronize_session=False); reads use populate_existing so they always
    reflect the row as stored.

Any SQLAlchemyError is re-raised as StorageError.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, TypeVar

from sqlalchemy import Select, delete, func, select, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from entity_lifecycle.domain.errors import ConcurrencyConflictError, StorageError
from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.record import Entity, RecordMeta
from entity_lifecycle.domain.repositories.base import LifecycleRepository

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


@contextmanager
def storage_errors() -> Iterator[None]:
    """Translate SQLAlchemy failures into the opaque StorageError category."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage failure: %s", exc)
        raise StorageError(str(exc)) from exc


def column_value(value: Any) -> Any:
    """Enum members are stored as their string value."""
    return value.value if isinstance(value, Enum) else value


def record_to_domain(row: Any) -> RecordMeta:
    return RecordMeta(
        id=row.id,
        created_at=row.created_at,
        last_modified_at=row.last_modified_at,
        deleted_at=row.deleted_at,
        version=row.version,
        created_by=row.created_by,
        last_modified_by=row.last_modified_by,
    )


class SqlLifecycleRepository(LifecycleRepository[E]):
    """Lifecycle operations over one ORM class that mixes in RecordColumns.

    Subclasses set _orm and _entity_name and implement the two mapping
    hooks: _to_domain (row → entity) and _content_values (entity → the
    business columns, excluding the RecordColumns block).
    """

    _orm: ClassVar[type[Any]]
    _entity_name: ClassVar[str] = "Entity"

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    @abstractmethod
    def _to_domain(row: Any) -> E:
        """Map an ORM row to its domain entity."""

    @staticmethod
    @abstractmethod
    def _content_values(entity: E) -> dict[str, Any]:
        """Column values for the entity's business content."""

    # ------------------------------------------------------------------ #
    # Statement helpers                                                    #
    # ------------------------------------------------------------------ #

    def _select(self) -> Select:
        return select(self._orm).execution_options(populate_existing=True)

    def _active(self) -> Any:
        return self._orm.deleted_at.is_(None)

    def _deleted(self) -> Any:
        return self._orm.deleted_at.is_not(None)

    async def _first(self, stmt: Select) -> E | None:
        with storage_errors():
            result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def _lowest_id(self, *criteria: Any) -> E | None:
        """First match by id, for lookups on columns without a unique constraint."""
        return await self._first(
            self._select().where(*criteria).order_by(self._orm.id.asc()).limit(1)
        )

    async def _count(self, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(self._orm).where(*criteria)
        with storage_errors():
            result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _page(self, page: PageRequest, *criteria: Any) -> Page[E]:
        total = await self._count(*criteria)
        stmt = (
            self._select()
            .where(*criteria)
            .order_by(self._orm.id.asc())
            .limit(page.size)
            .offset(page.offset)
        )
        with storage_errors():
            result = await self._session.execute(stmt)
        return Page.of([self._to_domain(row) for row in result.scalars()], page, total)

    async def _execute_rowcount(self, stmt: Any) -> int:
        with storage_errors():
            result = await self._session.execute(
                stmt.execution_options(synchronize_session=False)
            )
        return result.rowcount

    # ------------------------------------------------------------------ #
    # LifecycleRepository                                                  #
    # ------------------------------------------------------------------ #

    async def find_active(self, id: int) -> E | None:
        return await self._first(self._select().where(self._orm.id == id, self._active()))

    async def find_any(self, id: int) -> E | None:
        return await self._first(self._select().where(self._orm.id == id))

    async def list_active(self, page: PageRequest) -> Page[E]:
        return await self._page(page, self._active())

    async def list_deleted(self, page: PageRequest) -> Page[E]:
        return await self._page(page, self._deleted())

    async def list_all(self, page: PageRequest) -> Page[E]:
        return await self._page(page, true())

    async def persist(self, entity: E) -> E:
        if entity.is_new:
            return await self._insert(entity)
        return await self._update(entity)

    async def _insert(self, entity: E) -> E:
        record = entity.record
        audit: dict[str, Any] = {
            "deleted_at": record.deleted_at,
            "version": 0,
            "created_by": record.created_by,
            "last_modified_by": record.last_modified_by,
        }
        # Omitted timestamps fall back to the server_default now().
        if record.created_at is not None:
            audit["created_at"] = record.created_at
        if record.last_modified_at is not None:
            audit["last_modified_at"] = record.last_modified_at
        row = self._orm(**self._content_values(entity), **audit)
        self._session.add(row)
        with storage_errors():
            await self._session.flush()
            await self._session.refresh(row)
        logger.debug("Inserted %s row %s", self._entity_name, row.id)
        return self._to_domain(row)

    async def _update(self, entity: E) -> E:
        record = entity.record
        values = self._content_values(entity)
        values["version"] = self._orm.version + 1
        values["last_modified_at"] = (
            record.last_modified_at if record.last_modified_at is not None else func.now()
        )
        values["last_modified_by"] = record.last_modified_by
        stmt = (
            update(self._orm)
            .where(self._orm.id == record.id, self._orm.version == record.version)
            .values(**values)
        )
        if await self._execute_rowcount(stmt) == 0:
            logger.warning(
                "Version check failed for %s %s at version %s",
                self._entity_name,
                record.id,
                record.version,
            )
            raise ConcurrencyConflictError(
                f"{self._entity_name} {record.id} was modified or removed "
                f"since version {record.version}"
            )
        stored = await self.find_any(record.id)
        if stored is None:
            raise ConcurrencyConflictError(
                f"{self._entity_name} {record.id} was removed during update"
            )
        return stored

    async def mark_deleted(self, id: int, deleted_at: datetime) -> int:
        stmt = (
            update(self._orm)
            .where(self._orm.id == id, self._active())
            .values(deleted_at=deleted_at)
        )
        return await self._execute_rowcount(stmt)

    async def clear_deleted(self, id: int) -> int:
        stmt = (
            update(self._orm)
            .where(self._orm.id == id, self._deleted())
            .values(deleted_at=None)
        )
        return await self._execute_rowcount(stmt)

    async def erase_any(self, id: int) -> int:
        return await self._execute_rowcount(delete(self._orm).where(self._orm.id == id))

    async def exists_active(self, id: int) -> bool:
        return await self._count(self._orm.id == id, self._active()) > 0

    async def count_active(self) -> int:
        return await self._count(self._active())

    async def count_deleted(self) -> int:
        return await self._count(self._deleted())

    async def count_all(self) -> int:
        return await self._count()
