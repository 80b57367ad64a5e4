"""In-memory pagination over a fully materialised, ordered result set.

Used when a query returns a whole collection instead of pushing LIMIT/OFFSET
down to the store (the in-memory repositories).  Store-level pagination
belongs in the query layer instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from entity_lifecycle.domain.errors import InvalidArgumentError
from entity_lifecycle.domain.models.page import Page, PageRequest

T = TypeVar("T")


def page_from_list(items: Sequence[T], request: PageRequest) -> Page[T]:
    """Cut the requested window out of *items*.

    start = page × size, end = min(start + size, len(items)).  A page past
    the end yields empty content, never an error; total_elements is always
    len(items).  *items* is not modified.

    Raises InvalidArgumentError only for a malformed request (negative page,
    size below one).
    """
    if request.page < 0 or request.size < 1:
        raise InvalidArgumentError(
            f"page must be >= 0 and size >= 1, got page={request.page} size={request.size}"
        )
    total = len(items)
    start = request.offset
    end = min(start + request.size, total)
    content = list(items[start:end]) if start <= total else []
    return Page.of(content, request, total)
