"""Generic entity lifecycle service.

Orchestrates validation, pre/post hooks and repository calls into the public
create / update / soft-delete / restore / hard-delete API shared by every
entity type, and owns the state machine:

    ACTIVE  --soft_delete-->  DELETED
    DELETED --restore------>  ACTIVE
    ACTIVE | DELETED --hard_delete--> ERASED   (terminal)

Pipeline for every create/update, without exception:
    validate → pre_save → repository.persist → post_save

Entity-specific behaviour is supplied as a LifecycleHooks strategy object at
construction; the service itself is never subclassed to change the
pipeline.  The acting user and the clock are explicit inputs so audit
fields do not depend on ambient framework state.

Failure policy: every precondition violation is raised as a typed
LifecycleError; repository errors propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Generic, TypeVar

from entity_lifecycle.domain.errors import (
    AlreadyDeletedError,
    ConcurrencyConflictError,
    InvalidArgumentError,
    NotDeletedError,
    NotFoundError,
)
from entity_lifecycle.domain.models.enums import DeletionFilter, RecordState
from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.record import Entity
from entity_lifecycle.domain.repositories.base import LifecycleRepository

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)

Clock = Callable[[], datetime]

DEFAULT_MAX_PAGE_SIZE = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LifecycleHooks(Generic[E]):
    """Extension points for one entity type.

    Every hook defaults to identity.  validate() rejects business content by
    raising EntityValidationError; pre_save() may normalise fields (trim,
    lower-case, ...) and returns the entity to persist; post_save() receives
    the stored entity and returns what the caller gets back.
    """

    async def validate(self, entity: E) -> None:
        return None

    async def pre_save(self, entity: E) -> E:
        return entity

    async def post_save(self, entity: E) -> E:
        return entity


class LifecycleService(Generic[E]):
    """CRUD + soft-delete API over a LifecycleRepository.

    The service holds no state between calls: every operation re-reads or
    re-writes through the repository.  Each public method is expected to run
    inside one transaction (one AsyncSession.begin() block).
    """

    def __init__(
        self,
        repository: LifecycleRepository[E],
        hooks: LifecycleHooks[E] | None = None,
        clock: Clock = utc_now,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
        entity_name: str = "Entity",
    ) -> None:
        if max_page_size < 1:
            raise InvalidArgumentError(f"max_page_size must be >= 1, got {max_page_size}")
        self._repository = repository
        self._hooks: LifecycleHooks[E] = hooks if hooks is not None else LifecycleHooks()
        self._clock = clock
        self._max_page_size = max_page_size
        self._entity_name = entity_name

    @property
    def repository(self) -> LifecycleRepository[E]:
        return self._repository

    @property
    def hooks(self) -> LifecycleHooks[E]:
        return self._hooks

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    async def create(self, entity: E, actor: str | None = None) -> E:
        """Persist a new entity and return it with id, timestamps and version 0."""
        if entity is None:
            raise InvalidArgumentError(f"{self._entity_name} must not be None")
        if not entity.is_new:
            logger.warning("Refusing to create %s that already has id %s", self._entity_name, entity.id)
            raise InvalidArgumentError(
                f"{self._entity_name} already has id {entity.id}; use update() instead"
            )
        logger.debug("Creating %s", self._entity_name)
        now = self._clock()
        stamped = entity.with_record(
            created_at=now,
            last_modified_at=now,
            created_by=actor,
            last_modified_by=actor,
            deleted_at=None,
            version=None,
        )
        saved = await self._save(stamped)
        logger.info("%s created with id %s", self._entity_name, saved.id)
        return saved

    async def create_all(self, entities: Iterable[E], actor: str | None = None) -> list[E]:
        """Create each entity in order through the full pipeline."""
        return [await self.create(entity, actor) for entity in entities]

    async def update(self, id: int, entity: E, actor: str | None = None) -> E:
        """Overwrite the content of record *id* with *entity*.

        entity.version must be the version the caller loaded; a stale
        version raises ConcurrencyConflictError.  created_at/created_by and
        the deletion state are taken from the stored record, never from the
        caller.
        """
        self._require_id(id)
        if entity is None:
            raise InvalidArgumentError(f"{self._entity_name} must not be None")
        if entity.version is None:
            raise InvalidArgumentError(
                f"{self._entity_name} {id} update requires the version that was loaded"
            )
        logger.debug("Updating %s %s at version %s", self._entity_name, id, entity.version)
        existing = await self._repository.find_any(id)
        if existing is None:
            logger.warning("Cannot update %s %s: not found", self._entity_name, id)
            raise NotFoundError(self._entity_name, id)

        now = self._clock()
        created_at = existing.record.created_at
        if created_at is not None and now < created_at:
            now = created_at
        stamped = entity.with_record(
            id=id,
            created_at=created_at,
            created_by=existing.record.created_by,
            deleted_at=existing.record.deleted_at,
            last_modified_at=now,
            last_modified_by=actor,
        )
        saved = await self._save(stamped)
        logger.info("%s %s updated to version %s", self._entity_name, id, saved.version)
        return saved

    async def soft_delete(self, id: int) -> None:
        """ACTIVE → DELETED.

        Raises NotFoundError for an unknown id, AlreadyDeletedError when the
        record is already deleted, and ConcurrencyConflictError when a
        concurrent caller won the conditional update.
        """
        self._require_id(id)
        logger.debug("Soft-deleting %s %s", self._entity_name, id)
        existing = await self._repository.find_any(id)
        if existing is None:
            logger.warning("Cannot soft-delete %s %s: not found", self._entity_name, id)
            raise NotFoundError(self._entity_name, id)
        if existing.is_deleted:
            logger.warning("Cannot soft-delete %s %s: already deleted", self._entity_name, id)
            raise AlreadyDeletedError(self._entity_name, id)
        affected = await self._repository.mark_deleted(id, self._clock())
        if affected == 0:
            logger.warning("Lost soft-delete race on %s %s", self._entity_name, id)
            raise ConcurrencyConflictError(
                f"{self._entity_name} {id} changed state while being soft-deleted"
            )
        logger.info("%s %s soft-deleted", self._entity_name, id)

    async def restore(self, id: int) -> None:
        """DELETED → ACTIVE.  Mirror image of soft_delete (NotDeletedError if active)."""
        self._require_id(id)
        logger.debug("Restoring %s %s", self._entity_name, id)
        existing = await self._repository.find_any(id)
        if existing is None:
            logger.warning("Cannot restore %s %s: not found", self._entity_name, id)
            raise NotFoundError(self._entity_name, id)
        if not existing.is_deleted:
            logger.warning("Cannot restore %s %s: not deleted", self._entity_name, id)
            raise NotDeletedError(self._entity_name, id)
        affected = await self._repository.clear_deleted(id)
        if affected == 0:
            logger.warning("Lost restore race on %s %s", self._entity_name, id)
            raise ConcurrencyConflictError(
                f"{self._entity_name} {id} changed state while being restored"
            )
        logger.info("%s %s restored", self._entity_name, id)

    async def hard_delete(self, id: int) -> None:
        """ACTIVE | DELETED → ERASED.  Erasing an absent id is a no-op."""
        self._require_id(id)
        logger.debug("Erasing %s %s", self._entity_name, id)
        affected = await self._repository.erase_any(id)
        if affected:
            logger.info("%s %s erased", self._entity_name, id)
        else:
            logger.warning("%s %s not found for erase; nothing to do", self._entity_name, id)

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    async def find_by_id(self, id: int) -> E | None:
        """Return the active entity, or None if it is absent or soft-deleted."""
        self._require_id(id)
        logger.debug("Looking up active %s %s", self._entity_name, id)
        return await self._repository.find_active(id)

    async def find_by_id_including_deleted(self, id: int) -> E | None:
        self._require_id(id)
        logger.debug("Looking up %s %s including deleted", self._entity_name, id)
        return await self._repository.find_any(id)

    async def exists_by_id(self, id: int) -> bool:
        self._require_id(id)
        return await self._repository.exists_active(id)

    async def is_deleted(self, id: int) -> bool:
        """True only for an existing, soft-deleted record."""
        entity = await self.find_by_id_including_deleted(id)
        return entity is not None and entity.is_deleted

    async def state_of(self, id: int) -> RecordState:
        """Current state of *id*; ids with no stored record report ERASED."""
        entity = await self.find_by_id_including_deleted(id)
        if entity is None:
            return RecordState.ERASED
        return RecordState.DELETED if entity.is_deleted else RecordState.ACTIVE

    async def list(
        self,
        page: PageRequest,
        filter: DeletionFilter = DeletionFilter.ACTIVE,
    ) -> Page[E]:
        """Return one page of records matching *filter*, ordered by id."""
        self._check_page(page)
        logger.debug(
            "Listing %s (%s), page %s size %s", self._entity_name, filter.value, page.page, page.size
        )
        return await self._repository.list(page, filter)

    async def count(self, filter: DeletionFilter = DeletionFilter.ACTIVE) -> int:
        total = await self._repository.count(filter)
        logger.debug("%s count (%s): %s", self._entity_name, filter.value, total)
        return total

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    async def _save(self, entity: E) -> E:
        await self._hooks.validate(entity)
        prepared = await self._hooks.pre_save(entity)
        stored = await self._repository.persist(prepared)
        return await self._hooks.post_save(stored)

    def _require_id(self, id: int | None) -> None:
        if id is None:
            logger.warning("%s operation called with a None id", self._entity_name)
            raise InvalidArgumentError(f"{self._entity_name} id must not be None")

    def _check_page(self, page: PageRequest) -> None:
        if page is None:
            raise InvalidArgumentError("page request must not be None")
        if page.page < 0:
            raise InvalidArgumentError(f"page must be >= 0, got {page.page}")
        if not 1 <= page.size <= self._max_page_size:
            raise InvalidArgumentError(
                f"page size must be between 1 and {self._max_page_size}, got {page.size}"
            )
