"""Entity record model: identity, audit, soft-delete and version state.

These are pure domain objects with no ORM or persistence concerns.

Every concrete entity embeds a RecordMeta by value as its ``record`` field
instead of inheriting audit columns through a class hierarchy.  The
lifecycle service only ever touches ``entity.record``; the rest of the
entity is opaque business content.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

E = TypeVar("E", bound="Entity")


class RecordMeta(BaseModel):
    """Versioned, auditable metadata of a stored record.

    id: assigned by the store on first persist; None while new
    created_at: set once at first persist, immutable afterwards
    last_modified_at: refreshed on every persist
    deleted_at: None while active; the deletion instant once soft-deleted
    version: optimistic-concurrency counter; 0 after first persist
    created_by / last_modified_by: actor identities supplied by the caller
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    created_at: datetime | None = None
    last_modified_at: datetime | None = None
    deleted_at: datetime | None = None
    version: int | None = Field(default=None, ge=0)
    created_by: str | None = None
    last_modified_by: str | None = None

    @model_validator(mode="after")
    def _created_not_after_modified(self) -> RecordMeta:
        if (
            self.created_at is not None
            and self.last_modified_at is not None
            and self.created_at > self.last_modified_at
        ):
            raise ValueError(
                f"created_at ({self.created_at.isoformat()}) must not be after "
                f"last_modified_at ({self.last_modified_at.isoformat()})"
            )
        return self

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_modified(self) -> bool:
        """True once the record has been persisted again after creation."""
        return self.last_modified_at is not None and self.last_modified_at != self.created_at

    @property
    def lifetime_seconds(self) -> int:
        if self.created_at is None or self.last_modified_at is None:
            return 0
        return int((self.last_modified_at - self.created_at).total_seconds())


class Entity(BaseModel):
    """Base for every lifecycle-managed domain entity.

    Equality and hashing are identity-based: two entities are equal only if
    they are the same object, or share a non-null id and concrete type.
    Entities are frozen; use with_record() or model_copy(update=...) to derive a
    changed copy.
    """

    model_config = ConfigDict(frozen=True)

    record: RecordMeta = Field(default_factory=RecordMeta)

    @property
    def id(self) -> int | None:
        return self.record.id

    @property
    def version(self) -> int | None:
        return self.record.version

    @property
    def is_new(self) -> bool:
        return self.record.is_new

    @property
    def is_deleted(self) -> bool:
        return self.record.is_deleted

    def with_record(self: E, **changes: Any) -> E:
        """Return a copy whose embedded RecordMeta has *changes* applied."""
        return self.model_copy(update={"record": self.record.model_copy(update=changes)})

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Entity):
            return NotImplemented
        return type(self) is type(other) and self.id is not None and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else hash(type(self))
