"""
Page request parsing for search endpoints.

Usage:
    from auto_api.routers._common.pagination import get_pageable

    @router.get("")
    def find(pageable: Pageable = Depends(get_pageable)):
        ...
"""

from fastapi import Query

from auto_api.services.domain.query_builder import Pageable, create_pageable
from shared.config.constants import Limits

# Query parameters that are paging, not search criteria
PAGING_PARAMS = frozenset({"size", "page"})


def get_pageable(
    size: int | None = Query(
        default=None,
        ge=0,
        le=Limits.MAX_PAGE_SIZE,
        description="Page size, 0 returns every match",
    ),
    page: int | None = Query(
        default=None,
        ge=0,
        description="Zero-based page number",
    ),
) -> Pageable:
    """FastAPI dependency for the page request."""
    return create_pageable(size, page)
