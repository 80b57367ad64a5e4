"""Tests for the get_repositories() DI factory."""

from unittest.mock import AsyncMock

from entity_lifecycle.infrastructure.persistence.repositories import (
    Repositories,
    SqlEmployeeRepository,
    SqlPersonRepository,
    get_repositories,
)


def _repos():
    return get_repositories(AsyncMock())


def test_get_repositories_returns_repositories_instance():
    assert isinstance(_repos(), Repositories)


def test_repositories_people_is_correct_type():
    assert isinstance(_repos().people, SqlPersonRepository)


def test_repositories_employees_is_correct_type():
    assert isinstance(_repos().employees, SqlEmployeeRepository)


def test_repositories_share_one_session():
    session = AsyncMock()
    repos = get_repositories(session)
    assert repos.people._session is session
    assert repos.employees._session is session


def test_repositories_dataclass_has_two_fields():
    assert len(Repositories.__dataclass_fields__) == 2
