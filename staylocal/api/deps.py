"""Shared API dependencies: single import point for all routers.

Re-exports the database session, authentication and pagination dependencies
so that router modules can import everything they need from one place::

    from staylocal.api.deps import get_db, get_current_user, require_admin
"""

from dataclasses import dataclass

from fastapi import Query

from staylocal.auth.dependencies import (
    get_current_user,
    require_admin,
    require_host,
    require_roles,
)
from staylocal.config import settings
from staylocal.database import get_db


@dataclass
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def pages(self, total: int) -> int:
        return -(-total // self.limit) if total else 0


def get_pagination(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"),
) -> Pagination:
    return Pagination(page=page, limit=limit)


__all__ = [
    "Pagination",
    "get_db",
    "get_current_user",
    "get_pagination",
    "require_admin",
    "require_host",
    "require_roles",
]
