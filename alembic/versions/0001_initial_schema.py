"""Initial schema: people and employees.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "last_modified_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("created_by", sa.Text, nullable=True),
        sa.Column("last_modified_by", sa.Text, nullable=True),
    ]


def _personal_columns() -> list[sa.Column]:
    return [
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("middle_name", sa.String(50), nullable=True),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("gender", sa.String(6), nullable=True),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("address", sa.String(200), nullable=True),
        sa.Column("citizenship", sa.String(50), nullable=True),
        sa.Column("passport_series", sa.String(10), nullable=True),
        sa.Column("passport_number", sa.String(20), nullable=True),
        sa.Column("passport_issue_date", sa.Date, nullable=True),
        sa.Column("passport_issuer", sa.String(200), nullable=True),
        sa.Column("inn", sa.String(12), nullable=True),
        sa.Column("snils", sa.String(14), nullable=True),
        sa.Column("marital_status", sa.String(20), nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "people",
        *_record_columns(),
        *_personal_columns(),
        sa.UniqueConstraint("email", name="uq_people_email"),
    )
    op.create_index("ix_people_deleted_at", "people", ["deleted_at"])

    op.create_table(
        "employees",
        *_record_columns(),
        *_personal_columns(),
        sa.Column("employee_number", sa.String(20), nullable=True),
        sa.Column("hire_date", sa.Date, nullable=True),
        sa.Column("termination_date", sa.Date, nullable=True),
        sa.Column("termination_reason", sa.String(500), nullable=True),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("work_schedule", sa.String(20), nullable=True),
        sa.Column("employment_type", sa.String(20), nullable=True),
        sa.Column("salary", sa.Double, nullable=True),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("work_email", sa.String(100), nullable=True),
        sa.Column("work_phone", sa.String(20), nullable=True),
        sa.Column("office_location", sa.String(100), nullable=True),
        sa.Column("supervisor_id", sa.BigInteger, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("emergency_contact_name", sa.String(100), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(20), nullable=True),
        sa.Column("bank_account", sa.String(50), nullable=True),
        sa.Column("bank_name", sa.String(100), nullable=True),
        sa.UniqueConstraint("email", name="uq_employees_email"),
        sa.UniqueConstraint("employee_number", name="uq_employees_employee_number"),
    )
    op.create_index("ix_employees_deleted_at", "employees", ["deleted_at"])
    op.create_index("ix_employees_department", "employees", ["department"])
    op.create_index("ix_employees_supervisor_id", "employees", ["supervisor_id"])


def downgrade() -> None:
    op.drop_index("ix_employees_supervisor_id", table_name="employees")
    op.drop_index("ix_employees_department", table_name="employees")
    op.drop_index("ix_employees_deleted_at", table_name="employees")
    op.drop_table("employees")

    op.drop_index("ix_people_deleted_at", table_name="people")
    op.drop_table("people")
