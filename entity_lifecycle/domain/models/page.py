"""Page request and page result models.

PageRequest carries no range constraints of its own: the lifecycle service
decides what counts as a legal page size and rejects bad requests with
InvalidArgumentError rather than a Pydantic ValidationError.
"""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class PageRequest(BaseModel):
    """Zero-based page number plus page size."""

    model_config = ConfigDict(frozen=True)

    page: int = 0
    size: int = 20

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(BaseModel, Generic[T]):
    """A bounded, offset-addressed slice of an ordered result set."""

    model_config = ConfigDict(frozen=True)

    content: list[T] = Field(default_factory=list)
    page_number: int
    page_size: int
    total_elements: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_elements / self.page_size)

    @computed_field
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def is_first(self) -> bool:
        return self.page_number == 0

    @property
    def is_last(self) -> bool:
        return self.page_number + 1 >= self.total_pages

    @property
    def has_next(self) -> bool:
        return not self.is_last

    @classmethod
    def of(cls, content: list[T], request: PageRequest, total_elements: int) -> Page[T]:
        return cls(
            content=content,
            page_number=request.page,
            page_size=request.size,
            total_elements=total_elements,
        )

    @classmethod
    def empty(cls, request: PageRequest) -> Page[T]:
        return cls.of([], request, 0)
