"""Domain enumerations for the entity lifecycle layer.

All string-valued enums use str mixin so they serialize cleanly to JSON
and remain comparable to plain strings (Pydantic default behaviour).
"""

from __future__ import annotations

from enum import Enum


class RecordState(str, Enum):
    """Position of a record in the soft-delete state machine.

    ERASED is terminal: the record no longer exists in storage.
    """

    ACTIVE = "active"
    DELETED = "deleted"
    ERASED = "erased"


class DeletionFilter(str, Enum):
    """Which records a listing or count covers."""

    ACTIVE = "active"
    DELETED = "deleted"
    ALL = "all"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @property
    def opposite(self) -> Gender:
        return Gender.FEMALE if self is Gender.MALE else Gender.MALE

    @property
    def pension_age(self) -> int:
        return {Gender.MALE: 65, Gender.FEMALE: 60}[self]


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"

    @property
    def has_marriage_experience(self) -> bool:
        return self is not MaritalStatus.SINGLE


class AgeCategory(str, Enum):
    """Coarse age bracket derived from a birth date."""

    UNKNOWN = "unknown"
    CHILD = "child"
    YOUNG_ADULT = "young_adult"
    ADULT = "adult"
    MIDDLE_AGED = "middle_aged"
    SENIOR = "senior"

    @classmethod
    def for_age(cls, age: int | None) -> AgeCategory:
        if age is None or age < 0:
            return cls.UNKNOWN
        if age < 18:
            return cls.CHILD
        if age < 30:
            return cls.YOUNG_ADULT
        if age < 50:
            return cls.ADULT
        if age < 65:
            return cls.MIDDLE_AGED
        return cls.SENIOR


class EmploymentType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"
    INTERN = "intern"
    TEMPORARY = "temporary"


class WorkSchedule(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    REMOTE = "remote"
    FLEXIBLE = "flexible"
    SHIFT = "shift"
