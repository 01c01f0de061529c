"""
Common utilities shared across routers.
"""

from .base_uri import create_base_uri
from .pagination import PAGING_PARAMS, get_pageable

__all__ = [
    "create_base_uri",
    "PAGING_PARAMS",
    "get_pageable",
]
