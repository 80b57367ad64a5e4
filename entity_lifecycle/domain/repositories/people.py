"""Person and employee repository interfaces."""

from __future__ import annotations

from abc import abstractmethod

from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.people import Employee, Person

from .base import LifecycleRepository


class PersonRepository(LifecycleRepository[Person]):
    """Lifecycle storage for Person entities plus uniqueness lookups.

    Lookups by natural key search every record, deleted or not, because the
    underlying unique constraints cover soft-deleted rows as well.  inn and
    passport_number carry no constraint; those lookups return the match with
    the lowest id.
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> Person | None:
        """Return the person with this (already normalised) email, or None."""

    @abstractmethod
    async def find_by_inn(self, inn: str) -> Person | None:
        """Return the person with this taxpayer number, or None."""

    @abstractmethod
    async def find_by_passport_number(self, passport_number: str) -> Person | None:
        """Return the person with this passport number, or None."""


class EmployeeRepository(LifecycleRepository[Employee]):
    """Lifecycle storage for Employee entities plus employee-specific queries.

    find_by_* lookups span all deletion states (see PersonRepository).
    list_by_department and count_by_supervisor cover active records only.
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> Employee | None:
        """Return the employee whose personal email matches, or None."""

    @abstractmethod
    async def find_by_inn(self, inn: str) -> Employee | None:
        """Return the employee with this taxpayer number, or None."""

    @abstractmethod
    async def find_by_passport_number(self, passport_number: str) -> Employee | None:
        """Return the employee with this passport number, or None."""

    @abstractmethod
    async def find_by_employee_number(self, employee_number: str) -> Employee | None:
        """Return the employee with this personnel number, or None."""

    @abstractmethod
    async def find_by_work_email(self, work_email: str) -> Employee | None:
        """Return the employee with this work email, or None."""

    @abstractmethod
    async def list_by_department(self, department: str, page: PageRequest) -> Page[Employee]:
        """Return a page of active employees in *department*, ordered by id."""

    @abstractmethod
    async def count_by_supervisor(self, supervisor_id: int) -> int:
        """Number of active employees reporting to *supervisor_id*."""
