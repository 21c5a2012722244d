from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    total: int
    limit: int
    offset: int
    has_more: bool

    @computed_field
    @property
    def page(self) -> int:
        """Current page number (1-indexed)"""
        return (self.offset // self.limit) + 1 if self.limit else 1

    @computed_field
    @property
    def total_pages(self) -> int:
        if not self.limit:
            return 1
        return max(1, (self.total + self.limit - 1) // self.limit)


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper"""
    items: list[T]
    pagination: PaginationMeta
