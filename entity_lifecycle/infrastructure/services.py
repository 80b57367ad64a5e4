"""Service wiring at the application boundary.

Binds the people and employee services to one AsyncSession, with the page
size limit taken from Settings.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from entity_lifecycle.domain.services.people import EmployeeService, PersonService
from entity_lifecycle.infrastructure.database import Settings, settings
from entity_lifecycle.infrastructure.persistence.repositories import get_repositories


@dataclass
class Services:
    """All lifecycle services bound to a single AsyncSession."""

    people: PersonService
    employees: EmployeeService


def get_services(session: AsyncSession, config: Settings | None = None) -> Services:
    """Construct the services over get_repositories(session).

        async with AsyncSessionLocal() as session, session.begin():
            services = get_services(session)
            person = await services.people.create(Person.create("Ada", "Lovelace"), actor="hr")
    """
    config = config or settings
    repos = get_repositories(session)
    return Services(
        people=PersonService(repos.people, max_page_size=config.max_page_size),
        employees=EmployeeService(repos.employees, max_page_size=config.max_page_size),
    )
