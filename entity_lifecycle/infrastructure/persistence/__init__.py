"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and SQLAlchemy mapper configuration)
and exports the repository implementations and the DI factory.
"""

from entity_lifecycle.infrastructure.persistence.models import *  # noqa: F401, F403
from entity_lifecycle.infrastructure.persistence.models import __all__ as _orm_all
from entity_lifecycle.infrastructure.persistence.repositories import (
    InMemoryEmployeeRepository,
    InMemoryPersonRepository,
    Repositories,
    SqlEmployeeRepository,
    SqlLifecycleRepository,
    SqlPersonRepository,
    get_repositories,
)

__all__ = _orm_all + [
    "Repositories",
    "SqlLifecycleRepository",
    "SqlPersonRepository",
    "SqlEmployeeRepository",
    "InMemoryPersonRepository",
    "InMemoryEmployeeRepository",
    "get_repositories",
]
