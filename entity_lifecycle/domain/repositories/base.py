"""Generic lifecycle repository interface.

LifecycleRepository[E] is the minimal operation set a storage backend must
provide for the lifecycle service.  Concrete implementations live in
entity_lifecycle/infrastructure/persistence/ and are wired at the
application boundary via dependency injection.

Design notes:
  - All methods are async to accommodate async database drivers (asyncpg / SQLAlchemy async).
  - E is the domain entity type (never an ORM row or DTO).
  - mark_deleted() and clear_deleted() are conditional single-statement
    updates (test-and-set on deleted_at), never read-then-write, so two
    concurrent callers cannot both report success.
  - persist() enforces optimistic concurrency on the entity's version.
  - The repository records transitions; it never decides when they happen.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, TypeVar

from entity_lifecycle.domain.models.enums import DeletionFilter
from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.record import Entity

E = TypeVar("E", bound=Entity)


class LifecycleRepository(ABC, Generic[E]):
    """Abstract storage contract for a soft-deletable, versioned entity."""

    @abstractmethod
    async def find_active(self, id: int) -> E | None:
        """Return the entity only if it exists and is not soft-deleted."""

    @abstractmethod
    async def find_any(self, id: int) -> E | None:
        """Return the entity regardless of deletion state, or None."""

    @abstractmethod
    async def list_active(self, page: PageRequest) -> Page[E]:
        """Return a page of active entities ordered by id."""

    @abstractmethod
    async def list_deleted(self, page: PageRequest) -> Page[E]:
        """Return a page of soft-deleted entities ordered by id."""

    @abstractmethod
    async def list_all(self, page: PageRequest) -> Page[E]:
        """Return a page of all entities ordered by id."""

    @abstractmethod
    async def persist(self, entity: E) -> E:
        """Insert a new entity or update an existing one.

        Inserts assign the id and start the version at 0.  Updates succeed
        only if the stored version equals entity.version, and advance it by
        one; otherwise ConcurrencyConflictError is raised.  Returns the
        entity as stored.
        """

    @abstractmethod
    async def mark_deleted(self, id: int, deleted_at: datetime) -> int:
        """Set deleted_at only if currently unset.  Returns rows affected (0 or 1)."""

    @abstractmethod
    async def clear_deleted(self, id: int) -> int:
        """Clear deleted_at only if currently set.  Returns rows affected (0 or 1)."""

    @abstractmethod
    async def erase_any(self, id: int) -> int:
        """Physically remove the record in any state.  Returns rows affected."""

    @abstractmethod
    async def exists_active(self, id: int) -> bool:
        """True if an active (not soft-deleted) record with this id exists."""

    @abstractmethod
    async def count_active(self) -> int:
        """Number of active records."""

    @abstractmethod
    async def count_deleted(self) -> int:
        """Number of soft-deleted records."""

    @abstractmethod
    async def count_all(self) -> int:
        """Number of records in any deletion state."""

    async def list(self, page: PageRequest, filter: DeletionFilter) -> Page[E]:
        """Dispatch to the listing method matching *filter*."""
        if filter is DeletionFilter.DELETED:
            return await self.list_deleted(page)
        if filter is DeletionFilter.ALL:
            return await self.list_all(page)
        return await self.list_active(page)

    async def count(self, filter: DeletionFilter) -> int:
        """Dispatch to the count method matching *filter*."""
        if filter is DeletionFilter.DELETED:
            return await self.count_deleted()
        if filter is DeletionFilter.ALL:
            return await self.count_all()
        return await self.count_active()
