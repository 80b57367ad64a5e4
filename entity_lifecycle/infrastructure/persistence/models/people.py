"""People-management ORM models: people, employees.

Both tables carry the RecordColumns audit/version block plus the personal
data columns; employees adds employment columns.  gender, marital_status,
work_schedule and employment_type hold enum values as plain strings,
enforced at the application layer.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Date, Double, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from entity_lifecycle.infrastructure.database import Base

from .base import RecordColumns


class PersonalColumns:
    """Personal data columns shared by people and employees."""

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    middle_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(6), nullable=True)  # male / female
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    citizenship: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    passport_series: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    passport_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    passport_issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    passport_issuer: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    inn: Mapped[Optional[str]] = mapped_column(String(12), nullable=True)
    snils: Mapped[Optional[str]] = mapped_column(String(14), nullable=True)
    marital_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Person(RecordColumns, PersonalColumns, Base):
    """Stored person.  email is unique across active and deleted rows."""

    __tablename__ = "people"
    __table_args__ = (UniqueConstraint("email", name="uq_people_email"),)


class Employee(RecordColumns, PersonalColumns, Base):
    """Stored employee.

    employee_number is the personnel number (unique); supervisor_id refers
    to another employee's id but is not a foreign key, so erasing a
    supervisor never cascades.
    """

    __tablename__ = "employees"
    __table_args__ = (
        UniqueConstraint("email", name="uq_employees_email"),
        UniqueConstraint("employee_number", name="uq_employees_employee_number"),
    )

    employee_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    hire_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    termination_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    termination_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    position: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    work_schedule: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    employment_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    salary: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)  # ISO 4217
    work_email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    work_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    office_location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    supervisor_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    emergency_contact_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    emergency_contact_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bank_account: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    bank_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
