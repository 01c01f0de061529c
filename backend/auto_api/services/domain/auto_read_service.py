"""
Auto Read Service.

Loads single Autos by id and pages of Autos by search criteria.

Usage:
    from auto_api.services.domain import AutoReadService

    service = AutoReadService(db)
    auto = service.find_by_id(1, include_repairs=True)
    page = service.find({"engineName": "Delta"}, Pageable(size=10))
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session, contains_eager

from auto_api.models import Auto, AutoFile, Repair
from auto_api.services.domain.query_builder import Page, Pageable, QueryBuilder
from shared.config.constants import Limits
from shared.config.logging import get_logger
from shared.utils.exceptions import AutoNotFoundError, AutosNotFoundError

logger = get_logger(__name__)

# Trailing path segment that is an Auto id (ASCII digits only)
ID_PATTERN = re.compile(r"^[0-9]+$")


def id_in_range(auto_id: int) -> bool:
    """Whether the id fits the BIGINT key column."""
    return 0 <= auto_id <= Limits.MAX_ID


class AutoReadService:
    """Read-only access to the Auto aggregate."""

    ID_PATTERN = ID_PATTERN

    def __init__(self, db: Session):
        self._db = db
        self._query_builder = QueryBuilder()

    def find_by_id(self, auto_id: int, include_repairs: bool = False) -> Auto:
        """
        Find an Auto with its Engine and, optionally, its Repairs.

        The row is always re-read from the database, never taken from the
        session's identity map.

        Raises:
            AutoNotFoundError: If no Auto has the id.
        """
        if auto_id is None or not id_in_range(auto_id):
            raise AutoNotFoundError(auto_id)

        stmt = (
            select(Auto)
            .join(Auto.engine)
            .options(contains_eager(Auto.engine))
            .where(Auto.id == auto_id)
            .execution_options(populate_existing=True)
        )
        if include_repairs:
            stmt = (
                stmt.outerjoin(Auto.repairs)
                .options(contains_eager(Auto.repairs))
                .order_by(Repair.id)
            )

        auto = self._db.execute(stmt).unique().scalar_one_or_none()
        if auto is None:
            raise AutoNotFoundError(auto_id)

        logger.debug("Auto found", auto_id=auto.id, version=auto.version)
        return auto

    def find(
        self,
        criteria: Mapping[str, Any] | None = None,
        pageable: Pageable | None = None,
    ) -> Page:
        """
        Search Autos.

        Raises:
            AutosNotFoundError: If nothing matches.
            InvalidCriteriaError: If a criterion cannot be applied.
        """
        criteria = dict(criteria or {})
        query = self._query_builder.build(criteria, pageable)

        autos = list(self._db.scalars(query.statement()).unique())
        if not autos:
            raise AutosNotFoundError(criteria, query.pageable.number)

        total = self._db.scalar(query.count_statement()) or 0
        logger.debug("Autos found", count=len(autos), total=total)
        return Page(content=autos, total_elements=total, pageable=query.pageable)

    def find_file_by_auto_id(self, auto_id: int) -> AutoFile | None:
        """Attachment of the Auto, if one exists."""
        if not id_in_range(auto_id):
            return None
        return self._db.scalar(select(AutoFile).where(AutoFile.auto_id == auto_id))
