"""Domain model package.

All domain objects are pure Python / Pydantic models with no ORM or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .enums import (
    AgeCategory,
    DeletionFilter,
    EmploymentType,
    Gender,
    MaritalStatus,
    RecordState,
    WorkSchedule,
)
from .page import Page, PageRequest
from .people import Employee, Person, PersonalDetails
from .record import Entity, RecordMeta

__all__ = [
    # enums
    "AgeCategory",
    "DeletionFilter",
    "EmploymentType",
    "Gender",
    "MaritalStatus",
    "RecordState",
    "WorkSchedule",
    # record
    "Entity",
    "RecordMeta",
    # paging
    "Page",
    "PageRequest",
    # people
    "PersonalDetails",
    "Person",
    "Employee",
]
