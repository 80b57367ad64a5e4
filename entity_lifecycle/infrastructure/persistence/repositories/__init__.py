"""Concrete repository implementations.

Exports the SqlRepository classes, their in-memory counterparts, and the
get_repositories() factory for wiring at the application boundary.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .base import SqlLifecycleRepository
from .memory import (
    InMemoryEmployeeRepository,
    InMemoryLifecycleRepository,
    InMemoryPersonRepository,
)
from .people import SqlEmployeeRepository, SqlPersonRepository


@dataclass
class Repositories:
    """All repository instances bound to a single AsyncSession."""

    people: SqlPersonRepository
    employees: SqlEmployeeRepository


def get_repositories(session: AsyncSession) -> Repositories:
    """Construct all repositories bound to the given session.

    Typical use, one transaction per unit of work:

        async with AsyncSessionLocal() as session, session.begin():
            repos = get_repositories(session)
            service = PersonService(repos.people)
            person = await service.create(Person.create("Ada", "Lovelace"), actor="hr")
    """
    return Repositories(
        people=SqlPersonRepository(session),
        employees=SqlEmployeeRepository(session),
    )


__all__ = [
    "SqlLifecycleRepository",
    "SqlPersonRepository",
    "SqlEmployeeRepository",
    "InMemoryLifecycleRepository",
    "InMemoryPersonRepository",
    "InMemoryEmployeeRepository",
    "Repositories",
    "get_repositories",
]
