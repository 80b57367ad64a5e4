"""People-management domain models: Person and Employee.

Both are flat compositions: the shared personal data lives in a
PersonalDetails value object, embedded by value in Person (as ``details``)
and in Employee (as ``person``), next to the embedded RecordMeta every
Entity carries.  Length limits mirror the column widths of the people and
employees tables; business rules (formats, uniqueness) are enforced by the
lifecycle hooks in domain/services/people.py, not here.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import AgeCategory, EmploymentType, Gender, MaritalStatus, WorkSchedule
from .record import Entity

_CORPORATE_DOMAINS = ("@company.com", "@organization.com")
_ADULT_AGE = 18
_ROOKIE_DAYS = 180
_VETERAN_YEARS = 5


def _years_between(start: date, end: date) -> int:
    """Whole calendar years from *start* to *end* (negative if end < start)."""
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def _months_between(start: date, end: date) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def _add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:  # 29 February in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


class PersonalDetails(BaseModel):
    """Personal data shared by every people-management entity.

    first_name and last_name are required; everything else is optional.
    passport_* / inn / snils are identity-document fields; inn is the
    taxpayer number and snils the insurance account number.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    middle_name: str | None = Field(default=None, max_length=50)
    birth_date: date | None = None
    gender: Gender | None = None
    email: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=200)
    citizenship: str | None = Field(default=None, max_length=50)
    passport_series: str | None = Field(default=None, max_length=10)
    passport_number: str | None = Field(default=None, max_length=20)
    passport_issue_date: date | None = None
    passport_issuer: str | None = Field(default=None, max_length=200)
    inn: str | None = Field(default=None, max_length=12)
    snils: str | None = Field(default=None, max_length=14)
    marital_status: MaritalStatus | None = None
    photo_url: str | None = Field(default=None, max_length=500)
    notes: str | None = None

    @property
    def full_name(self) -> str:
        """'Last First Middle', skipping missing parts."""
        parts = [self.last_name, self.first_name, self.middle_name]
        return " ".join(p for p in parts if p)

    @property
    def formal_address(self) -> str:
        if self.gender is None:
            return self.last_name
        title = "Mr." if self.gender is Gender.MALE else "Ms."
        return f"{title} {self.last_name}".strip()

    def age(self, on: date | None = None) -> int | None:
        if self.birth_date is None:
            return None
        return _years_between(self.birth_date, on or date.today())

    def is_adult(self, on: date | None = None) -> bool:
        age = self.age(on)
        return age is not None and age >= _ADULT_AGE

    def is_pensioner(self, on: date | None = None) -> bool:
        if self.birth_date is None or self.gender is None:
            return False
        return _add_years(self.birth_date, self.gender.pension_age) <= (on or date.today())

    def age_category(self, on: date | None = None) -> AgeCategory:
        return AgeCategory.for_age(self.age(on))

    @property
    def is_corporate_email(self) -> bool:
        if self.email is None:
            return False
        return any(domain in self.email.lower() for domain in _CORPORATE_DOMAINS)

    @property
    def is_passport_complete(self) -> bool:
        return bool(
            self.passport_series
            and self.passport_number
            and self.passport_issue_date is not None
            and self.passport_issuer
        )

    @property
    def has_contact_info(self) -> bool:
        return bool(self.email or self.phone or self.address)


class Person(Entity):
    """A stored person record."""

    details: PersonalDetails

    @classmethod
    def create(cls, first_name: str, last_name: str, **details: object) -> Person:
        """Named constructor for a new (unsaved) person."""
        return cls(
            details=PersonalDetails(first_name=first_name, last_name=last_name, **details)
        )


class Employee(Entity):
    """A stored employee record.

    employee_number is the human-facing personnel number (e.g. "EMP1A2B3C4D"),
    distinct from the storage id.  An employee is *employed* while is_active
    is set and no termination_date is recorded.
    """

    person: PersonalDetails
    employee_number: str | None = Field(default=None, max_length=20)
    hire_date: date | None = None
    termination_date: date | None = None
    termination_reason: str | None = Field(default=None, max_length=500)
    position: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    work_schedule: WorkSchedule | None = None
    employment_type: EmploymentType | None = None
    salary: float | None = None
    currency: str | None = Field(default=None, max_length=3)
    work_email: str | None = Field(default=None, max_length=100)
    work_phone: str | None = Field(default=None, max_length=20)
    office_location: str | None = Field(default=None, max_length=100)
    supervisor_id: int | None = None
    is_active: bool = True
    emergency_contact_name: str | None = Field(default=None, max_length=100)
    emergency_contact_phone: str | None = Field(default=None, max_length=20)
    bank_account: str | None = Field(default=None, max_length=50)
    bank_name: str | None = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def _salary_requires_currency(self) -> Employee:
        if self.salary is not None and self.currency is None:
            raise ValueError("currency is required when salary is set")
        return self

    @model_validator(mode="after")
    def _inactive_requires_termination_date(self) -> Employee:
        if not self.is_active and self.termination_date is None:
            raise ValueError("termination_date is required for an inactive employee")
        return self

    @property
    def is_employed(self) -> bool:
        return self.is_active and self.termination_date is None

    @property
    def is_terminated(self) -> bool:
        return not self.is_employed

    def _employment_end(self, on: date | None) -> date:
        return self.termination_date or on or date.today()

    def days_employed(self, on: date | None = None) -> int:
        if self.hire_date is None:
            return 0
        return (self._employment_end(on) - self.hire_date).days

    def years_employed(self, on: date | None = None) -> int:
        if self.hire_date is None:
            return 0
        return _years_between(self.hire_date, self._employment_end(on))

    def is_rookie(self, on: date | None = None) -> bool:
        return self.days_employed(on) < _ROOKIE_DAYS

    def is_veteran(self, on: date | None = None) -> bool:
        return self.years_employed(on) >= _VETERAN_YEARS

    def employment_period(self, on: date | None = None) -> str:
        """Human-readable tenure, e.g. '2 years 3 months'."""
        if self.hire_date is None:
            return "unknown"
        years, months = divmod(_months_between(self.hire_date, self._employment_end(on)), 12)
        parts = []
        if years > 0:
            parts.append(_plural(years, "year"))
        if months > 0:
            parts.append(_plural(months, "month"))
        return " ".join(parts) if parts else "less than a month"

    @property
    def has_supervisor(self) -> bool:
        return self.supervisor_id is not None

    @property
    def is_remote(self) -> bool:
        return self.work_schedule is WorkSchedule.REMOTE

    @property
    def formatted_salary(self) -> str:
        if self.salary is None or self.currency is None:
            return "not specified"
        return f"{self.salary:.2f} {self.currency}"

    @property
    def work_email_matches_personal(self) -> bool:
        email = self.person.email
        return email is not None and self.work_email is not None and (
            email.lower() == self.work_email.lower()
        )
