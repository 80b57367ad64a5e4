"""ORM model registry: imports every table module so each mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.
"""

from entity_lifecycle.infrastructure.persistence.models.base import RecordColumns
from entity_lifecycle.infrastructure.persistence.models.people import (
    Employee,
    PersonalColumns,
    Person,
)

__all__ = [
    # Mixins
    "RecordColumns",
    "PersonalColumns",
    # People
    "Person",
    "Employee",
]
