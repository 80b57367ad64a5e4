"""Domain services package."""

from .lifecycle import LifecycleHooks, LifecycleService, utc_now
from .pagination import page_from_list
from .people import EmployeeHooks, EmployeeService, PersonHooks, PersonService

__all__ = [
    "LifecycleHooks",
    "LifecycleService",
    "utc_now",
    "page_from_list",
    "PersonHooks",
    "PersonService",
    "EmployeeHooks",
    "EmployeeService",
]
