"""SQLAlchemy implementations of PersonRepository and EmployeeRepository."""

from __future__ import annotations

from typing import Any

from entity_lifecycle.domain.models.enums import (
    EmploymentType,
    Gender,
    MaritalStatus,
    WorkSchedule,
)
from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.people import Employee as DomainEmployee
from entity_lifecycle.domain.models.people import Person as DomainPerson
from entity_lifecycle.domain.models.people import PersonalDetails
from entity_lifecycle.domain.repositories.people import EmployeeRepository, PersonRepository
from entity_lifecycle.infrastructure.persistence.models.people import Employee as OrmEmployee
from entity_lifecycle.infrastructure.persistence.models.people import Person as OrmPerson

from .base import SqlLifecycleRepository, column_value, record_to_domain

_PERSONAL_FIELDS = tuple(PersonalDetails.model_fields)
_EMPLOYMENT_FIELDS = tuple(
    name for name in DomainEmployee.model_fields if name not in ("record", "person")
)


def _personal_to_domain(row: Any) -> PersonalDetails:
    values = {name: getattr(row, name) for name in _PERSONAL_FIELDS}
    values["gender"] = Gender(row.gender) if row.gender else None
    values["marital_status"] = MaritalStatus(row.marital_status) if row.marital_status else None
    return PersonalDetails(**values)


def _personal_values(details: PersonalDetails) -> dict[str, Any]:
    return {name: column_value(getattr(details, name)) for name in _PERSONAL_FIELDS}


class _PersonalLookups:
    """Lookups on the personal columns shared by the people and employees tables."""

    async def find_by_inn(self, inn: str) -> Any:
        return await self._lowest_id(self._orm.inn == inn)

    async def find_by_passport_number(self, passport_number: str) -> Any:
        return await self._lowest_id(self._orm.passport_number == passport_number)


class SqlPersonRepository(
    _PersonalLookups, SqlLifecycleRepository[DomainPerson], PersonRepository
):
    _orm = OrmPerson
    _entity_name = "Person"

    @staticmethod
    def _to_domain(row: OrmPerson) -> DomainPerson:
        return DomainPerson(record=record_to_domain(row), details=_personal_to_domain(row))

    @staticmethod
    def _content_values(entity: DomainPerson) -> dict[str, Any]:
        return _personal_values(entity.details)

    async def find_by_email(self, email: str) -> DomainPerson | None:
        return await self._first(self._select().where(OrmPerson.email == email))


class SqlEmployeeRepository(
    _PersonalLookups, SqlLifecycleRepository[DomainEmployee], EmployeeRepository
):
    _orm = OrmEmployee
    _entity_name = "Employee"

    @staticmethod
    def _to_domain(row: OrmEmployee) -> DomainEmployee:
        values = {name: getattr(row, name) for name in _EMPLOYMENT_FIELDS}
        values["work_schedule"] = WorkSchedule(row.work_schedule) if row.work_schedule else None
        values["employment_type"] = (
            EmploymentType(row.employment_type) if row.employment_type else None
        )
        return DomainEmployee(
            record=record_to_domain(row),
            person=_personal_to_domain(row),
            **values,
        )

    @staticmethod
    def _content_values(entity: DomainEmployee) -> dict[str, Any]:
        values = _personal_values(entity.person)
        values.update({name: column_value(getattr(entity, name)) for name in _EMPLOYMENT_FIELDS})
        return values

    async def find_by_email(self, email: str) -> DomainEmployee | None:
        return await self._first(self._select().where(OrmEmployee.email == email))

    async def find_by_employee_number(self, employee_number: str) -> DomainEmployee | None:
        return await self._first(
            self._select().where(OrmEmployee.employee_number == employee_number)
        )

    async def find_by_work_email(self, work_email: str) -> DomainEmployee | None:
        return await self._lowest_id(OrmEmployee.work_email == work_email)

    async def list_by_department(
        self, department: str, page: PageRequest
    ) -> Page[DomainEmployee]:
        return await self._page(page, self._active(), OrmEmployee.department == department)

    async def count_by_supervisor(self, supervisor_id: int) -> int:
        return await self._count(OrmEmployee.supervisor_id == supervisor_id, self._active())
