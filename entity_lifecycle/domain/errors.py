"""Lifecycle error taxonomy.

Every failure surfaced by the lifecycle layer derives from LifecycleError so
adapters (REST, CLI, batch jobs) can map the whole family in one place.
None of these are retried internally.
"""

from __future__ import annotations


class LifecycleError(Exception):
    """Base class for lifecycle-layer errors."""


class InvalidArgumentError(LifecycleError, ValueError):
    """Malformed caller input: missing id, out-of-range page request, etc."""


class EntityValidationError(LifecycleError, ValueError):
    """A validate hook rejected the entity's business content."""


class NotFoundError(LifecycleError):
    """The id does not resolve in the state the operation requires."""

    def __init__(self, entity: str, id: object) -> None:
        super().__init__(f"{entity} {id} not found")
        self.entity = entity
        self.id = id


class AlreadyDeletedError(LifecycleError):
    """soft_delete() was called on a record that is already soft-deleted."""

    def __init__(self, entity: str, id: object) -> None:
        super().__init__(f"{entity} {id} is already deleted")
        self.entity = entity
        self.id = id


class NotDeletedError(LifecycleError):
    """restore() was called on a record that is active."""

    def __init__(self, entity: str, id: object) -> None:
        super().__init__(f"{entity} {id} is not deleted")
        self.entity = entity
        self.id = id


class ConcurrencyConflictError(LifecycleError):
    """Stale version on update, or a lost race on a conditional transition.

    The caller should reload the record and decide whether to retry.
    """


class StorageError(LifecycleError):
    """Opaque storage-layer failure (connectivity, constraint violation, ...)."""
