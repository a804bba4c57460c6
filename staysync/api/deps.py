"""API dependencies."""

from typing import Annotated

from fastapi import Header, Query

from staysync.database import get_db

__all__ = ["Pagination", "get_actor_id", "get_db", "get_pagination"]


async def get_actor_id(
    x_actor_id: Annotated[str | None, Header(max_length=100)] = None,
) -> str | None:
    """Opaque identity of the caller, recorded in the audit trail only."""
    return x_actor_id


class Pagination:
    """Page/page-size query parameters."""

    def __init__(self, page: int, page_size: int):
        self.page = page
        self.page_size = page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


async def get_pagination(
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> Pagination:
    return Pagination(page=page, page_size=page_size)
