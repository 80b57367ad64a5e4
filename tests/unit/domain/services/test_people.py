"""Tests for entity_lifecycle/domain/services/people.py."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch
from uuid import UUID

import pytest

from entity_lifecycle.domain.errors import (
    EntityValidationError,
    InvalidArgumentError,
    LifecycleError,
    NotFoundError,
)
from entity_lifecycle.domain.models.page import PageRequest
from entity_lifecycle.domain.models.people import Employee, Person, PersonalDetails
from entity_lifecycle.domain.services.people import (
    EmployeeHooks,
    EmployeeService,
    PersonHooks,
    PersonService,
    check_personal_details,
    format_phone_number,
    is_valid_passport,
    normalize_personal_details,
)
from entity_lifecycle.infrastructure.persistence.repositories.memory import (
    InMemoryEmployeeRepository,
    InMemoryPersonRepository,
)

TODAY = date(2024, 6, 15)
T0 = datetime(2024, 6, 15, 9, 0, tzinfo=timezone.utc)


def _clock():
    ticks = iter(range(1, 10_000))
    return lambda: T0 + timedelta(seconds=next(ticks))


def _details(**overrides):
    defaults = dict(first_name="Ivan", last_name="Petrov")
    defaults.update(overrides)
    return PersonalDetails(**defaults)


def _employee(**overrides):
    defaults = dict(
        person=_details(),
        hire_date=date(2020, 3, 1),
        position="Engineer",
        department="R&D",
    )
    defaults.update(overrides)
    return Employee(**defaults)


def _person_service():
    return PersonService(InMemoryPersonRepository(), clock=_clock(), today=lambda: TODAY)


def _employee_service():
    return EmployeeService(InMemoryEmployeeRepository(), clock=_clock(), today=lambda: TODAY)


# --- format_phone_number ---

def test_format_ten_digit_number():
    assert format_phone_number("9161234567") == "+7 (916) 123-45-67"


def test_format_eleven_digit_number_with_country_prefix():
    assert format_phone_number("8 916 123 45 67") == "+7 (916) 123-45-67"


def test_format_already_formatted_number_is_stable():
    assert format_phone_number("+7 (916) 123-45-67") == "+7 (916) 123-45-67"


def test_format_leaves_other_lengths_unchanged():
    assert format_phone_number("+44 20 7946 0958 12") == "+44 20 7946 0958 12"


def test_format_passes_none_through():
    assert format_phone_number(None) is None


# --- is_valid_passport ---

def test_passport_both_absent_is_valid():
    assert is_valid_passport(None, None) is True


def test_passport_well_formed():
    assert is_valid_passport("1234", "567890") is True


def test_passport_missing_number_is_invalid():
    assert is_valid_passport("1234", None) is False


def test_passport_bad_series_is_invalid():
    assert is_valid_passport("12A4", "567890") is False


# --- check_personal_details ---

def test_valid_details_pass():
    check_personal_details(
        _details(email="ivan@example.com", phone="+7 916 123-45-67", inn="1234567890"),
        TODAY,
    )


def test_blank_first_name_rejected():
    with pytest.raises(EntityValidationError):
        check_personal_details(_details(first_name="  "), TODAY)


@pytest.mark.parametrize(
    "field, value",
    [
        ("email", "not-an-email"),
        ("phone", "12-34"),
        ("inn", "12345"),
        ("snils", "1234567890"),
        ("passport_series", "1234"),
    ],
)
def test_bad_formats_rejected(field, value):
    with pytest.raises(EntityValidationError):
        check_personal_details(_details(**{field: value}), TODAY)


def test_future_birth_date_rejected():
    with pytest.raises(EntityValidationError):
        check_personal_details(_details(birth_date=TODAY + timedelta(days=1)), TODAY)


# --- normalize_personal_details ---

def test_normalize_trims_and_lowercases():
    normalized = normalize_personal_details(
        _details(first_name=" Ivan ", last_name="Petrov ", email=" Ivan@Example.COM ")
    )
    assert normalized.first_name == "Ivan"
    assert normalized.last_name == "Petrov"
    assert normalized.email == "ivan@example.com"


def test_normalize_formats_phone():
    assert normalize_personal_details(_details(phone="89161234567")).phone == "+7 (916) 123-45-67"


def test_normalize_trims_document_numbers():
    normalized = normalize_personal_details(
        _details(inn=" 1234567890 ", passport_series=" 1234", passport_number="567890 ")
    )
    assert normalized.inn == "1234567890"
    assert normalized.passport_series == "1234"
    assert normalized.passport_number == "567890"


# --- PersonHooks ---

async def test_person_hooks_reject_duplicate_email():
    repo = AsyncMock()
    repo.find_by_email.return_value = Person(details=_details()).with_record(id=5)
    hooks = PersonHooks(repo, today=lambda: TODAY)
    with pytest.raises(EntityValidationError):
        await hooks.validate(Person(details=_details(email="Ivan@example.com")))
    repo.find_by_email.assert_awaited_once_with("ivan@example.com")


async def test_person_hooks_allow_own_email_on_update():
    existing = Person(details=_details(email="ivan@example.com")).with_record(id=5)
    repo = AsyncMock()
    repo.find_by_email.return_value = existing
    await PersonHooks(repo, today=lambda: TODAY).validate(existing)


async def test_person_hooks_skip_lookup_without_email():
    repo = AsyncMock()
    await PersonHooks(repo, today=lambda: TODAY).validate(Person(details=_details()))
    repo.find_by_email.assert_not_awaited()


async def test_person_hooks_reject_duplicate_inn():
    repo = AsyncMock()
    repo.find_by_email.return_value = None
    repo.find_by_inn.return_value = Person(details=_details()).with_record(id=5)
    hooks = PersonHooks(repo, today=lambda: TODAY)
    with pytest.raises(EntityValidationError):
        await hooks.validate(Person(details=_details(inn=" 1234567890 ")))
    repo.find_by_inn.assert_awaited_once_with("1234567890")


async def test_person_hooks_reject_duplicate_passport_number():
    repo = AsyncMock()
    repo.find_by_inn.return_value = None
    repo.find_by_passport_number.return_value = Person(details=_details()).with_record(id=5)
    hooks = PersonHooks(repo, today=lambda: TODAY)
    with pytest.raises(EntityValidationError):
        await hooks.validate(
            Person(details=_details(passport_series="1234", passport_number="567890"))
        )
    repo.find_by_passport_number.assert_awaited_once_with("567890")


async def test_person_hooks_skip_document_lookups_without_documents():
    repo = AsyncMock()
    await PersonHooks(repo, today=lambda: TODAY).validate(Person(details=_details()))
    repo.find_by_inn.assert_not_awaited()
    repo.find_by_passport_number.assert_not_awaited()


# --- PersonService ---

async def test_person_create_normalizes_email():
    service = _person_service()
    created = await service.create(Person.create("Ivan", "Petrov", email="IVAN@Example.com"))
    assert created.details.email == "ivan@example.com"


async def test_person_duplicate_email_rejected():
    service = _person_service()
    await service.create(Person.create("Ivan", "Petrov", email="ivan@example.com"))
    with pytest.raises(EntityValidationError):
        await service.create(Person.create("Petr", "Ivanov", email="IVAN@example.com"))


async def test_person_email_stays_reserved_after_soft_delete():
    service = _person_service()
    created = await service.create(Person.create("Ivan", "Petrov", email="ivan@example.com"))
    await service.soft_delete(created.id)
    with pytest.raises(EntityValidationError):
        await service.create(Person.create("Petr", "Ivanov", email="ivan@example.com"))


async def test_person_update_keeps_own_email():
    service = _person_service()
    created = await service.create(Person.create("Ivan", "Petrov", email="ivan@example.com"))
    updated = await service.update(created.id, created)
    assert updated.version == 1


async def test_person_find_by_email_normalizes_input():
    service = _person_service()
    created = await service.create(Person.create("Ivan", "Petrov", email="ivan@example.com"))
    assert await service.find_by_email("  IVAN@example.com ") == created


async def test_person_find_by_blank_email_is_none():
    assert await _person_service().find_by_email("  ") is None


async def test_person_exists_by_email():
    service = _person_service()
    await service.create(Person.create("Ivan", "Petrov", email="ivan@example.com"))
    assert await service.exists_by_email("ivan@example.com") is True
    assert await service.exists_by_email("other@example.com") is False


async def test_person_duplicate_inn_rejected():
    service = _person_service()
    await service.create(Person.create("Ivan", "Petrov", inn="1234567890"))
    with pytest.raises(EntityValidationError):
        await service.create(Person.create("Petr", "Ivanov", inn="1234567890"))
    assert await service.count() == 1


async def test_person_duplicate_passport_number_rejected():
    service = _person_service()
    await service.create(
        Person.create("Ivan", "Petrov", passport_series="1234", passport_number="567890")
    )
    with pytest.raises(EntityValidationError):
        await service.create(
            Person.create("Petr", "Ivanov", passport_series="4321", passport_number="567890")
        )
    assert await service.count() == 1


async def test_person_update_keeps_own_documents():
    service = _person_service()
    created = await service.create(
        Person.create(
            "Ivan", "Petrov", inn="1234567890", passport_series="1234", passport_number="567890"
        )
    )
    updated = await service.update(created.id, created)
    assert updated.version == 1


async def test_person_find_by_inn_and_passport_number():
    service = _person_service()
    created = await service.create(
        Person.create(
            "Ivan", "Petrov", inn="1234567890", passport_series="1234", passport_number="567890"
        )
    )
    assert await service.find_by_inn(" 1234567890 ") == created
    assert await service.find_by_passport_number("567890") == created
    assert await service.find_by_inn(" ") is None
    assert await service.find_by_passport_number(None) is None


async def test_person_validation_failure_persists_nothing():
    service = _person_service()
    with pytest.raises(EntityValidationError):
        await service.create(Person.create("Ivan", "Petrov", inn="12"))
    assert await service.count() == 0


# --- EmployeeHooks ---

@pytest.mark.parametrize(
    "overrides",
    [
        {"hire_date": None},
        {"hire_date": TODAY + timedelta(days=1)},
        {"position": " "},
        {"department": None},
        {"employee_number": "e!"},
        {"salary": -1.0, "currency": "USD"},
        {"salary": 10.0, "currency": "US"},
        {"termination_date": date(2019, 1, 1)},
    ],
)
async def test_employee_hooks_reject_invalid_content(overrides):
    hooks = EmployeeHooks(AsyncMock(**{
        "find_by_email.return_value": None,
        "find_by_employee_number.return_value": None,
        "find_by_work_email.return_value": None,
    }), today=lambda: TODAY)
    with pytest.raises(EntityValidationError):
        await hooks.validate(_employee(**overrides))


async def test_employee_hooks_accept_lowercase_employee_number():
    repo = AsyncMock()
    repo.find_by_employee_number.return_value = None
    await EmployeeHooks(repo, today=lambda: TODAY).validate(_employee(employee_number="emp-01"))
    repo.find_by_employee_number.assert_awaited_once_with("EMP-01")


async def test_employee_hooks_reject_duplicate_work_email():
    repo = AsyncMock()
    repo.find_by_work_email.return_value = _employee().with_record(id=9)
    hooks = EmployeeHooks(repo, today=lambda: TODAY)
    with pytest.raises(EntityValidationError):
        await hooks.validate(_employee(work_email="ip@company.com"))


async def test_employee_duplicate_inn_rejected():
    service = _employee_service()
    await service.create(_employee(person=_details(inn="123456789012")))
    with pytest.raises(EntityValidationError):
        await service.create(_employee(person=_details(inn="123456789012")))


async def test_employee_duplicate_passport_number_rejected():
    service = _employee_service()
    await service.create(
        _employee(person=_details(passport_series="1234", passport_number="567890"))
    )
    with pytest.raises(EntityValidationError):
        await service.create(
            _employee(person=_details(passport_series="1234", passport_number="567890"))
        )


async def test_employee_pre_save_normalizes_fields():
    hooks = EmployeeHooks(AsyncMock(), today=lambda: TODAY)
    saved = await hooks.pre_save(
        _employee(
            employee_number=" emp-7 ",
            position=" Engineer ",
            department=" R&D ",
            work_email=" IP@Company.com ",
            salary=10.0,
            currency="usd",
        )
    )
    assert saved.employee_number == "EMP-7"
    assert saved.position == "Engineer"
    assert saved.department == "R&D"
    assert saved.work_email == "ip@company.com"
    assert saved.currency == "USD"


# --- EmployeeService.create / update ---

async def test_employee_create_generates_number_when_blank():
    created = await _employee_service().create(_employee())
    assert created.employee_number.startswith("EMP")
    assert len(created.employee_number) == 11


async def test_employee_create_keeps_supplied_number():
    created = await _employee_service().create(_employee(employee_number="emp-42"))
    assert created.employee_number == "EMP-42"


async def test_employee_duplicate_number_rejected():
    service = _employee_service()
    await service.create(_employee(employee_number="EMP-42"))
    with pytest.raises(EntityValidationError):
        await service.create(_employee(employee_number="emp-42"))


async def test_generate_employee_number_gives_up_after_100_attempts():
    repo = InMemoryEmployeeRepository()
    repo.find_by_employee_number = AsyncMock(return_value=_employee().with_record(id=1))
    service = EmployeeService(repo, clock=_clock(), today=lambda: TODAY)
    with pytest.raises(LifecycleError):
        await service.generate_employee_number()
    assert repo.find_by_employee_number.await_count == 100


async def test_generate_employee_number_format():
    fixed = UUID("12345678-9abc-def0-1234-56789abcdef0")
    with patch("entity_lifecycle.domain.services.people.uuid4", return_value=fixed):
        number = await _employee_service().generate_employee_number()
    assert number == "EMP12345678"


async def test_employee_update_keeps_stored_number():
    service = _employee_service()
    created = await service.create(_employee(employee_number="EMP-1"))
    updated = await service.update(
        created.id, created.model_copy(update={"employee_number": "EMP-2"})
    )
    assert updated.employee_number == "EMP-1"


async def test_employee_update_requires_active_record():
    service = _employee_service()
    created = await service.create(_employee())
    await service.soft_delete(created.id)
    with pytest.raises(NotFoundError):
        await service.update(created.id, created)


async def test_employee_update_requires_id():
    with pytest.raises(InvalidArgumentError):
        await _employee_service().update(None, _employee())


# --- termination ---

async def test_terminate_sets_termination_fields():
    service = _employee_service()
    created = await service.create(_employee())
    terminated = await service.terminate(created.id, date(2024, 6, 1), "Relocation")
    assert terminated.is_employed is False
    assert terminated.is_active is False
    assert terminated.termination_reason == "Relocation"
    assert terminated.version == 1


async def test_terminate_rejects_overlong_reason():
    service = _employee_service()
    created = await service.create(_employee())
    with pytest.raises(EntityValidationError):
        await service.terminate(created.id, date(2024, 6, 1), reason="x" * 501)
    stored = await service.find_by_id(created.id)
    assert stored.is_employed is True
    assert stored.version == 0


async def test_terminate_accepts_reason_at_limit():
    service = _employee_service()
    created = await service.create(_employee())
    terminated = await service.terminate(created.id, date(2024, 6, 1), reason="x" * 500)
    assert len(terminated.termination_reason) == 500


async def test_terminate_twice_rejected():
    service = _employee_service()
    created = await service.create(_employee())
    await service.terminate(created.id, date(2024, 6, 1))
    with pytest.raises(EntityValidationError):
        await service.terminate(created.id, date(2024, 6, 2))


async def test_terminate_before_hire_rejected():
    service = _employee_service()
    created = await service.create(_employee())
    with pytest.raises(EntityValidationError):
        await service.terminate(created.id, date(2019, 1, 1))


async def test_terminate_unknown_raises_not_found():
    with pytest.raises(NotFoundError):
        await _employee_service().terminate(5, date(2024, 6, 1))


async def test_reinstate_clears_termination():
    service = _employee_service()
    created = await service.create(_employee())
    await service.terminate(created.id, date(2024, 6, 1), "Layoff")
    reinstated = await service.reinstate(created.id)
    assert reinstated.is_employed is True
    assert reinstated.termination_reason is None


async def test_reinstate_employed_rejected():
    service = _employee_service()
    created = await service.create(_employee())
    with pytest.raises(EntityValidationError):
        await service.reinstate(created.id)


# --- supervisors ---

async def test_assign_and_remove_supervisor():
    service = _employee_service()
    boss = await service.create(_employee())
    worker = await service.create(_employee())
    assigned = await service.assign_supervisor(worker.id, boss.id)
    assert assigned.supervisor_id == boss.id
    assert await service.is_supervisor(boss.id) is True
    removed = await service.remove_supervisor(worker.id)
    assert removed.supervisor_id is None
    assert await service.is_supervisor(boss.id) is False


async def test_self_supervision_rejected():
    service = _employee_service()
    created = await service.create(_employee())
    with pytest.raises(EntityValidationError):
        await service.assign_supervisor(created.id, created.id)


async def test_deleted_supervisor_rejected():
    service = _employee_service()
    boss = await service.create(_employee())
    worker = await service.create(_employee())
    await service.soft_delete(boss.id)
    with pytest.raises(NotFoundError):
        await service.assign_supervisor(worker.id, boss.id)


async def test_soft_deleted_subordinates_not_counted():
    service = _employee_service()
    boss = await service.create(_employee())
    worker = await service.create(_employee())
    await service.assign_supervisor(worker.id, boss.id)
    await service.soft_delete(worker.id)
    assert await service.is_supervisor(boss.id) is False


# --- salary / tenure ---

async def test_update_salary():
    service = _employee_service()
    created = await service.create(_employee())
    updated = await service.update_salary(created.id, 5000.0, "eur")
    assert updated.salary == 5000.0
    assert updated.currency == "EUR"
    assert updated.formatted_salary == "5000.00 EUR"


@pytest.mark.parametrize("salary, currency", [(-1.0, "USD"), (100.0, "DOLLARS"), (100.0, " ")])
async def test_update_salary_rejects_invalid_input(salary, currency):
    service = _employee_service()
    created = await service.create(_employee())
    with pytest.raises(EntityValidationError):
        await service.update_salary(created.id, salary, currency)


async def test_update_rejects_overlong_position():
    service = _employee_service()
    created = await service.create(_employee())
    with pytest.raises(EntityValidationError):
        await service.update(created.id, created.model_copy(update={"position": "x" * 101}))


async def test_years_of_service():
    service = _employee_service()
    created = await service.create(_employee(hire_date=date(2020, 3, 1)))
    assert await service.years_of_service(created.id, TODAY) == 4


# --- lookups / listing ---

async def test_find_by_employee_number_normalizes_input():
    service = _employee_service()
    created = await service.create(_employee(employee_number="EMP-9"))
    assert await service.find_by_employee_number(" emp-9 ") == created


async def test_find_by_blank_employee_number_is_none():
    assert await _employee_service().find_by_employee_number("") is None


async def test_list_by_department_returns_active_members():
    service = _employee_service()
    a = await service.create(_employee(department="Sales"))
    b = await service.create(_employee(department="Sales"))
    await service.create(_employee(department="R&D"))
    await service.soft_delete(b.id)
    page = await service.list_by_department("Sales", PageRequest(page=0, size=10))
    assert [e.id for e in page.content] == [a.id]
    assert page.total_elements == 1


async def test_list_by_blank_department_is_empty():
    page = await _employee_service().list_by_department(" ", PageRequest(page=0, size=10))
    assert page.content == []
    assert page.total_elements == 0


async def test_list_by_department_checks_page_size():
    with pytest.raises(InvalidArgumentError):
        await _employee_service().list_by_department("Sales", PageRequest(page=0, size=500))
