"""
Domain Services - application layer of the Auto API.

Structure:
    Router / GraphQL resolver (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    QueryBuilder / CascadeDeleteService (data access)
        ↓
    Model (entity)

Usage:
    from auto_api.services.domain import AutoReadService, AutoWriteService

    auto = AutoReadService(db).find_by_id(1)
"""

from .auto_read_service import AutoReadService, ID_PATTERN, id_in_range
from .auto_write_service import AutoWriteService
from .query_builder import AutoQuery, Page, Pageable, Predicate, QueryBuilder, create_pageable
from .version import format_version_token, parse_version_token

__all__ = [
    "AutoReadService",
    "AutoWriteService",
    "ID_PATTERN",
    "id_in_range",
    "AutoQuery",
    "Page",
    "Pageable",
    "Predicate",
    "QueryBuilder",
    "create_pageable",
    "format_version_token",
    "parse_version_token",
]
