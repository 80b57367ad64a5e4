"""Lifecycle hooks and services for the people-management entities.

PersonHooks / EmployeeHooks are the strategy objects plugged into the
generic LifecycleService: they hold the business validation rules and the
field normalisation run before every persist.  PersonService and
EmployeeService add the natural-key lookups and employee workflows
(termination, supervisor assignment, salary changes) on top.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date
from uuid import uuid4

from pydantic import ValidationError

from entity_lifecycle.domain.errors import (
    EntityValidationError,
    LifecycleError,
    NotFoundError,
)
from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.people import Employee, Person, PersonalDetails
from entity_lifecycle.domain.models.record import Entity
from entity_lifecycle.domain.repositories.people import EmployeeRepository, PersonRepository

from .lifecycle import DEFAULT_MAX_PAGE_SIZE, Clock, LifecycleHooks, LifecycleService, utc_now

logger = logging.getLogger(__name__)

Today = Callable[[], date]

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")
PHONE_PATTERN = re.compile(r"^\+?[0-9. ()-]{10,25}$")
INN_PATTERN = re.compile(r"^[0-9]{10,12}$")
SNILS_PATTERN = re.compile(r"^[0-9]{11}$")
PASSPORT_SERIES_PATTERN = re.compile(r"^[0-9]{4}$")
PASSPORT_NUMBER_PATTERN = re.compile(r"^[0-9]{6}$")
EMPLOYEE_NUMBER_PATTERN = re.compile(r"^[A-Z0-9_\-]{3,20}$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

_EMPLOYEE_NUMBER_ATTEMPTS = 100


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _strip(value: str | None) -> str | None:
    return value.strip() if value is not None else None


def format_phone_number(phone: str | None) -> str | None:
    """Render 10- or 11-digit national numbers as '+7 (XXX) XXX-XX-XX'.

    Anything else is returned unchanged.
    """
    if _blank(phone):
        return phone
    digits = re.sub(r"[^0-9]", "", phone)
    if len(digits) == 11 and digits[0] in "78":
        digits = digits[1:]
    elif len(digits) != 10:
        return phone
    return f"+7 ({digits[:3]}) {digits[3:6]}-{digits[6:8]}-{digits[8:]}"


def is_valid_passport(series: str | None, number: str | None) -> bool:
    """Both parts absent, or both present and well-formed."""
    if _blank(series) and _blank(number):
        return True
    if _blank(series) or _blank(number):
        return False
    return bool(
        PASSPORT_SERIES_PATTERN.match(series.strip())
        and PASSPORT_NUMBER_PATTERN.match(number.strip())
    )


def check_personal_details(details: PersonalDetails, today: date) -> None:
    """Raise EntityValidationError on the first business-rule violation."""
    if _blank(details.first_name):
        raise EntityValidationError("first_name must not be blank")
    if _blank(details.last_name):
        raise EntityValidationError("last_name must not be blank")
    if not _blank(details.email) and not EMAIL_PATTERN.match(details.email.strip()):
        raise EntityValidationError(f"Invalid email format: {details.email}")
    if not _blank(details.phone) and not PHONE_PATTERN.match(details.phone.strip()):
        raise EntityValidationError(f"Invalid phone number format: {details.phone}")
    if not _blank(details.inn) and not INN_PATTERN.match(details.inn.strip()):
        raise EntityValidationError(f"Invalid INN format: {details.inn}")
    if not _blank(details.snils) and not SNILS_PATTERN.match(details.snils.strip()):
        raise EntityValidationError(f"Invalid SNILS format: {details.snils}")
    if not is_valid_passport(details.passport_series, details.passport_number):
        raise EntityValidationError("Invalid passport series or number")
    if details.birth_date is not None and details.birth_date > today:
        raise EntityValidationError("birth_date must not be in the future")


def normalize_personal_details(details: PersonalDetails) -> PersonalDetails:
    """Trim names and document numbers, lower-case the email, format the phone."""
    email = details.email.strip().lower() if details.email is not None else None
    return details.model_copy(
        update={
            "first_name": details.first_name.strip(),
            "last_name": details.last_name.strip(),
            "middle_name": _strip(details.middle_name),
            "email": email,
            "phone": format_phone_number(details.phone),
            "inn": _strip(details.inn),
            "passport_series": _strip(details.passport_series),
            "passport_number": _strip(details.passport_number),
        }
    )


def _ensure_unique(found: Entity | None, entity: Entity, message: str) -> None:
    if found is not None and found.id != entity.id:
        raise EntityValidationError(message)


async def check_document_uniqueness(
    repository: PersonRepository | EmployeeRepository,
    details: PersonalDetails,
    entity: Entity,
) -> None:
    """Reject an inn or passport number already held by another record."""
    if not _blank(details.inn):
        inn = details.inn.strip()
        _ensure_unique(
            await repository.find_by_inn(inn),
            entity,
            f"A record with INN {inn} already exists",
        )
    if not _blank(details.passport_number):
        number = details.passport_number.strip()
        _ensure_unique(
            await repository.find_by_passport_number(number),
            entity,
            f"A record with passport number {number} already exists",
        )


def revise_employee(employee: Employee, **changes: object) -> Employee:
    """Copy *employee* with *changes*, running field limits and model validators."""
    try:
        return Employee.model_validate({**employee.model_dump(), **changes})
    except ValidationError as exc:
        raise EntityValidationError(str(exc)) from exc


class PersonHooks(LifecycleHooks[Person]):
    """Validation and normalisation for Person records."""

    def __init__(self, repository: PersonRepository, today: Today = date.today) -> None:
        self._repository = repository
        self._today = today

    async def validate(self, entity: Person) -> None:
        check_personal_details(entity.details, self._today())
        if not _blank(entity.details.email):
            email = entity.details.email.strip().lower()
            _ensure_unique(
                await self._repository.find_by_email(email),
                entity,
                f"A person with email {email} already exists",
            )
        await check_document_uniqueness(self._repository, entity.details, entity)

    async def pre_save(self, entity: Person) -> Person:
        return entity.model_copy(update={"details": normalize_personal_details(entity.details)})


class EmployeeHooks(LifecycleHooks[Employee]):
    """Validation and normalisation for Employee records."""

    def __init__(self, repository: EmployeeRepository, today: Today = date.today) -> None:
        self._repository = repository
        self._today = today

    async def validate(self, entity: Employee) -> None:
        today = self._today()
        check_personal_details(entity.person, today)
        if entity.hire_date is None:
            raise EntityValidationError("hire_date is required")
        if entity.hire_date > today:
            raise EntityValidationError("hire_date must not be in the future")
        if _blank(entity.position):
            raise EntityValidationError("position is required")
        if _blank(entity.department):
            raise EntityValidationError("department is required")
        if not _blank(entity.employee_number) and not EMPLOYEE_NUMBER_PATTERN.match(
            entity.employee_number.strip().upper()
        ):
            raise EntityValidationError(
                f"Invalid employee number format: {entity.employee_number}"
            )
        if entity.salary is not None and entity.salary < 0:
            raise EntityValidationError(f"Invalid salary: {entity.salary}")
        if not _blank(entity.currency) and not CURRENCY_PATTERN.match(
            entity.currency.strip().upper()
        ):
            raise EntityValidationError(f"Invalid currency: {entity.currency}")
        if entity.termination_date is not None and entity.termination_date < entity.hire_date:
            raise EntityValidationError("termination_date must not be before hire_date")
        await self._check_uniqueness(entity)

    async def _check_uniqueness(self, entity: Employee) -> None:
        if not _blank(entity.person.email):
            email = entity.person.email.strip().lower()
            _ensure_unique(
                await self._repository.find_by_email(email),
                entity,
                f"An employee with email {email} already exists",
            )
        await check_document_uniqueness(self._repository, entity.person, entity)
        if not _blank(entity.employee_number):
            number = entity.employee_number.strip().upper()
            _ensure_unique(
                await self._repository.find_by_employee_number(number),
                entity,
                f"An employee with number {number} already exists",
            )
        if not _blank(entity.work_email):
            work_email = entity.work_email.strip().lower()
            _ensure_unique(
                await self._repository.find_by_work_email(work_email),
                entity,
                f"An employee with work email {work_email} already exists",
            )

    async def pre_save(self, entity: Employee) -> Employee:
        return entity.model_copy(
            update={
                "person": normalize_personal_details(entity.person),
                "employee_number": (
                    entity.employee_number.strip().upper()
                    if entity.employee_number is not None
                    else None
                ),
                "position": _strip(entity.position),
                "department": _strip(entity.department),
                "work_email": (
                    entity.work_email.strip().lower() if entity.work_email is not None else None
                ),
                "currency": (
                    entity.currency.strip().upper() if entity.currency is not None else None
                ),
            }
        )


class PersonService(LifecycleService[Person]):
    """Lifecycle service for Person records with email lookups."""

    def __init__(
        self,
        repository: PersonRepository,
        clock: Clock = utc_now,
        today: Today = date.today,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        super().__init__(
            repository,
            PersonHooks(repository, today),
            clock=clock,
            max_page_size=max_page_size,
            entity_name="Person",
        )
        self._people = repository

    async def find_by_email(self, email: str | None) -> Person | None:
        """Look up by email in any deletion state (emails stay reserved)."""
        if _blank(email):
            return None
        return await self._people.find_by_email(email.strip().lower())

    async def exists_by_email(self, email: str | None) -> bool:
        return await self.find_by_email(email) is not None

    async def find_by_inn(self, inn: str | None) -> Person | None:
        if _blank(inn):
            return None
        return await self._people.find_by_inn(inn.strip())

    async def find_by_passport_number(self, passport_number: str | None) -> Person | None:
        if _blank(passport_number):
            return None
        return await self._people.find_by_passport_number(passport_number.strip())


class EmployeeService(LifecycleService[Employee]):
    """Lifecycle service for Employee records plus employment workflows.

    Every workflow method loads the active employee, derives a re-validated copy
    (revise_employee) and routes it through update(), so hooks and the optimistic version
    check apply uniformly.
    """

    def __init__(
        self,
        repository: EmployeeRepository,
        clock: Clock = utc_now,
        today: Today = date.today,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        super().__init__(
            repository,
            EmployeeHooks(repository, today),
            clock=clock,
            max_page_size=max_page_size,
            entity_name="Employee",
        )
        self._employees = repository

    async def create(self, entity: Employee, actor: str | None = None) -> Employee:
        """Create an employee, generating an employee number when none is given."""
        if entity is not None and _blank(entity.employee_number):
            entity = revise_employee(
                entity, employee_number=await self.generate_employee_number()
            )
        return await super().create(entity, actor)

    async def update(self, id: int, entity: Employee, actor: str | None = None) -> Employee:
        """Update an active employee; the stored employee number is kept."""
        existing = await self._require_active(id)
        if entity is not None:
            entity = revise_employee(entity, employee_number=existing.employee_number)
        return await super().update(id, entity, actor)

    async def generate_employee_number(self) -> str:
        for _ in range(_EMPLOYEE_NUMBER_ATTEMPTS):
            candidate = f"EMP{uuid4().hex[:8].upper()}"
            if await self._employees.find_by_employee_number(candidate) is None:
                return candidate
        raise LifecycleError(
            f"Could not generate a unique employee number after {_EMPLOYEE_NUMBER_ATTEMPTS} attempts"
        )

    async def terminate(
        self,
        id: int,
        termination_date: date,
        reason: str | None = None,
        actor: str | None = None,
    ) -> Employee:
        employee = await self._require_active(id)
        if employee.termination_date is not None:
            raise EntityValidationError(f"Employee {id} is already terminated")
        terminated = revise_employee(
            employee,
            termination_date=termination_date,
            termination_reason=reason,
            is_active=False,
        )
        result = await self.update(id, terminated, actor)
        logger.info("Employee %s terminated as of %s", id, termination_date.isoformat())
        return result

    async def reinstate(self, id: int, actor: str | None = None) -> Employee:
        employee = await self._require_active(id)
        if employee.is_employed:
            raise EntityValidationError(f"Employee {id} is already active")
        reinstated = revise_employee(
            employee, termination_date=None, termination_reason=None, is_active=True
        )
        result = await self.update(id, reinstated, actor)
        logger.info("Employee %s reinstated", id)
        return result

    async def assign_supervisor(
        self, id: int, supervisor_id: int, actor: str | None = None
    ) -> Employee:
        if supervisor_id == id:
            raise EntityValidationError(f"Employee {id} cannot supervise themselves")
        employee = await self._require_active(id)
        await self._require_active(supervisor_id)
        return await self.update(
            id, revise_employee(employee, supervisor_id=supervisor_id), actor
        )

    async def remove_supervisor(self, id: int, actor: str | None = None) -> Employee:
        employee = await self._require_active(id)
        return await self.update(id, revise_employee(employee, supervisor_id=None), actor)

    async def update_salary(
        self, id: int, salary: float, currency: str, actor: str | None = None
    ) -> Employee:
        if salary is None or salary < 0:
            raise EntityValidationError(f"Invalid salary: {salary}")
        if _blank(currency) or not CURRENCY_PATTERN.match(currency.strip().upper()):
            raise EntityValidationError(f"Invalid currency: {currency}")
        employee = await self._require_active(id)
        return await self.update(
            id, revise_employee(employee, salary=salary, currency=currency), actor
        )

    async def is_supervisor(self, id: int) -> bool:
        self._require_id(id)
        return await self._employees.count_by_supervisor(id) > 0

    async def years_of_service(self, id: int, on: date | None = None) -> int:
        employee = await self._require_active(id)
        return employee.years_employed(on)

    async def find_by_employee_number(self, employee_number: str | None) -> Employee | None:
        if _blank(employee_number):
            return None
        return await self._employees.find_by_employee_number(employee_number.strip().upper())

    async def list_by_department(self, department: str | None, page: PageRequest) -> Page[Employee]:
        self._check_page(page)
        if _blank(department):
            return Page.empty(page)
        return await self._employees.list_by_department(department.strip(), page)

    async def _require_active(self, id: int) -> Employee:
        employee = await self.find_by_id(id)
        if employee is None:
            raise NotFoundError("Employee", id)
        return employee
