"""Dict-backed implementations of the lifecycle repositories.

Behaviourally equivalent to the SQL repositories for a single event loop:
ids are assigned from a counter, persist() enforces the version check, and
the conditional transitions report 0 when the precondition does not hold.
Listings are ordered by id and cut with page_from_list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from entity_lifecycle.domain.errors import ConcurrencyConflictError
from entity_lifecycle.domain.models.page import Page, PageRequest
from entity_lifecycle.domain.models.people import Employee, Person
from entity_lifecycle.domain.models.record import Entity
from entity_lifecycle.domain.repositories.base import LifecycleRepository
from entity_lifecycle.domain.repositories.people import EmployeeRepository, PersonRepository
from entity_lifecycle.domain.services.pagination import page_from_list

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


class InMemoryLifecycleRepository(LifecycleRepository[E]):
    _entity_name = "Entity"

    def __init__(self) -> None:
        self._rows: dict[int, E] = {}
        self._next_id = 1

    def _matching(self, predicate: Callable[[E], bool]) -> list[E]:
        return [self._rows[id] for id in sorted(self._rows) if predicate(self._rows[id])]

    def _first(self, predicate: Callable[[E], bool]) -> E | None:
        matches = self._matching(predicate)
        return matches[0] if matches else None

    async def find_active(self, id: int) -> E | None:
        entity = self._rows.get(id)
        return entity if entity is not None and not entity.is_deleted else None

    async def find_any(self, id: int) -> E | None:
        return self._rows.get(id)

    async def list_active(self, page: PageRequest) -> Page[E]:
        return page_from_list(self._matching(lambda e: not e.is_deleted), page)

    async def list_deleted(self, page: PageRequest) -> Page[E]:
        return page_from_list(self._matching(lambda e: e.is_deleted), page)

    async def list_all(self, page: PageRequest) -> Page[E]:
        return page_from_list(self._matching(lambda e: True), page)

    async def persist(self, entity: E) -> E:
        if entity.is_new:
            stored = entity.with_record(id=self._next_id, version=0)
            self._next_id += 1
        else:
            current = self._rows.get(entity.id)
            if current is None or current.version != entity.version:
                logger.warning(
                    "Version check failed for %s %s at version %s",
                    self._entity_name,
                    entity.id,
                    entity.version,
                )
                raise ConcurrencyConflictError(
                    f"{self._entity_name} {entity.id} was modified or removed "
                    f"since version {entity.version}"
                )
            # Same columns as the SQL UPDATE: audit creation fields and
            # deleted_at are not touched by persist().
            stored = entity.with_record(
                version=current.version + 1,
                created_at=current.record.created_at,
                created_by=current.record.created_by,
                deleted_at=current.record.deleted_at,
            )
        self._rows[stored.id] = stored
        return stored

    async def mark_deleted(self, id: int, deleted_at: datetime) -> int:
        entity = self._rows.get(id)
        if entity is None or entity.is_deleted:
            return 0
        self._rows[id] = entity.with_record(deleted_at=deleted_at)
        return 1

    async def clear_deleted(self, id: int) -> int:
        entity = self._rows.get(id)
        if entity is None or not entity.is_deleted:
            return 0
        self._rows[id] = entity.with_record(deleted_at=None)
        return 1

    async def erase_any(self, id: int) -> int:
        return 1 if self._rows.pop(id, None) is not None else 0

    async def exists_active(self, id: int) -> bool:
        return await self.find_active(id) is not None

    async def count_active(self) -> int:
        return len(self._matching(lambda e: not e.is_deleted))

    async def count_deleted(self) -> int:
        return len(self._matching(lambda e: e.is_deleted))

    async def count_all(self) -> int:
        return len(self._rows)


class InMemoryPersonRepository(InMemoryLifecycleRepository[Person], PersonRepository):
    _entity_name = "Person"

    async def find_by_email(self, email: str) -> Person | None:
        return self._first(lambda p: p.details.email == email)

    async def find_by_inn(self, inn: str) -> Person | None:
        return self._first(lambda p: p.details.inn == inn)

    async def find_by_passport_number(self, passport_number: str) -> Person | None:
        return self._first(lambda p: p.details.passport_number == passport_number)


class InMemoryEmployeeRepository(InMemoryLifecycleRepository[Employee], EmployeeRepository):
    _entity_name = "Employee"

    async def find_by_email(self, email: str) -> Employee | None:
        return self._first(lambda e: e.person.email == email)

    async def find_by_inn(self, inn: str) -> Employee | None:
        return self._first(lambda e: e.person.inn == inn)

    async def find_by_passport_number(self, passport_number: str) -> Employee | None:
        return self._first(lambda e: e.person.passport_number == passport_number)

    async def find_by_employee_number(self, employee_number: str) -> Employee | None:
        return self._first(lambda e: e.employee_number == employee_number)

    async def find_by_work_email(self, work_email: str) -> Employee | None:
        return self._first(lambda e: e.work_email == work_email)

    async def list_by_department(self, department: str, page: PageRequest) -> Page[Employee]:
        return page_from_list(
            self._matching(lambda e: not e.is_deleted and e.department == department), page
        )

    async def count_by_supervisor(self, supervisor_id: int) -> int:
        return len(
            self._matching(lambda e: not e.is_deleted and e.supervisor_id == supervisor_id)
        )
