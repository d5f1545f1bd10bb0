"""
FastAPI dependency injection providers.

Route handlers receive the database engine through ``Depends(get_db_engine)``
so tests can swap in an isolated engine with ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Generator

from fastapi import Query
from sqlalchemy.engine import Engine

from hotel_backoffice.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from hotel_backoffice.db.engine import engine


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> app.dependency_overrides[get_db_engine] = lambda: sqlite_engine
        >>> client = TestClient(app)
        >>> client.get("/api/rooms")
    """
    yield engine


class PageParams:
    """Pagination query parameters shared by every list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="1-based page number"),
        limit: int = Query(
            DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT, description="Items per page"
        ),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
