"""
Search Predicate Builder.

Translates a sparse criteria mapping into an ordered list of typed predicates
and folds them into one conjunctive WHERE clause. The result is a query
descriptor; executing it is up to the read service.

Order of application:
    engineName, modelYearMin, priceMax, esb, abs, airbag, parkingAssist,
    then every remaining key in mapping order (exact equality).

Usage:
    from auto_api.services.domain.query_builder import QueryBuilder, Pageable

    query = QueryBuilder().build({"engineName": "Delta", "abs": "true"}, Pageable())
    autos = db.scalars(query.statement()).all()
    total = db.scalar(query.count_statement())
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import contains_eager
from sqlalchemy.sql.elements import ColumnElement

from auto_api.models import Auto, Engine
from shared.config.constants import Limits, SafetyFeature
from shared.config.logging import get_logger
from shared.utils.exceptions import InvalidCriteriaError
from shared.utils.validators import escape_like_pattern

logger = get_logger(__name__)

ENGINE_NAME = "engineName"
MODEL_YEAR_MIN = "modelYearMin"
PRICE_MAX = "priceMax"


# =============================================================================
# Pagination
# =============================================================================


@dataclass(frozen=True)
class Pageable:
    """
    Page request: size and zero-based page number.

    size == 0 requests every match without LIMIT/OFFSET.
    """

    size: int = Limits.DEFAULT_PAGE_SIZE
    number: int = Limits.DEFAULT_PAGE_NUMBER

    @property
    def unpaged(self) -> bool:
        return self.size == 0

    @property
    def offset(self) -> int:
        return self.number * self.size


def create_pageable(size: Any = None, number: Any = None) -> Pageable:
    """
    Build a Pageable from raw request values.

    Missing, non-numeric or negative values fall back to the defaults; sizes
    above MAX_PAGE_SIZE are capped.
    """
    parsed_size = _parse_non_negative(size)
    parsed_number = _parse_non_negative(number)

    if parsed_size is None:
        parsed_size = Limits.DEFAULT_PAGE_SIZE
    parsed_size = min(parsed_size, Limits.MAX_PAGE_SIZE)

    if parsed_number is None:
        parsed_number = Limits.DEFAULT_PAGE_NUMBER

    return Pageable(size=parsed_size, number=parsed_number)


def _parse_non_negative(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed >= 0 else None


@dataclass
class Page:
    """One slice of a search result plus the total count of matches."""

    content: list[Auto]
    total_elements: int
    pageable: Pageable

    @property
    def size(self) -> int:
        return self.pageable.size

    @property
    def number(self) -> int:
        return self.pageable.number

    @property
    def total_pages(self) -> int:
        if self.pageable.unpaged:
            return 1
        return (self.total_elements + self.size - 1) // self.size

    def to_dict(self) -> dict[str, Any]:
        """Pagination metadata for responses."""
        return {
            "size": self.size,
            "number": self.number,
            "totalElements": self.total_elements,
            "totalPages": self.total_pages,
        }


# =============================================================================
# Predicates and query descriptor
# =============================================================================


@dataclass(frozen=True)
class Predicate:
    """A single search condition together with the criterion it came from."""

    key: str
    value: Any
    clause: ColumnElement[bool]


@dataclass
class AutoQuery:
    """
    Executable search descriptor.

    Every Auto is inner-joined to its Engine, so an Auto without an Engine is
    never returned.
    """

    predicates: list[Predicate] = field(default_factory=list)
    pageable: Pageable = field(default_factory=Pageable)

    def where_clause(self) -> ColumnElement[bool] | None:
        if not self.predicates:
            return None
        return and_(*(p.clause for p in self.predicates))

    def _apply_where(self, stmt: Select) -> Select:
        clause = self.where_clause()
        if clause is not None:
            stmt = stmt.where(clause)
        return stmt

    def statement(self) -> Select:
        """Select of the requested page, ordered by id."""
        stmt = (
            select(Auto)
            .join(Auto.engine)
            .options(contains_eager(Auto.engine))
            .order_by(Auto.id)
        )
        stmt = self._apply_where(stmt)
        if not self.pageable.unpaged:
            stmt = stmt.limit(self.pageable.size).offset(self.pageable.offset)
        return stmt

    def count_statement(self) -> Select:
        """Count of all matches, ignoring pagination."""
        stmt = select(func.count(Auto.id)).select_from(Auto).join(Auto.engine)
        return self._apply_where(stmt)


def _fits_bigint(value: int) -> bool:
    return -Limits.MAX_ID - 1 <= value <= Limits.MAX_ID


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _equality_columns() -> dict[str, Any]:
    """Auto columns addressable by attribute name and by its camelCase form."""
    columns: dict[str, Any] = {}
    for attr in Auto.__mapper__.column_attrs:
        column = getattr(Auto, attr.key)
        columns[attr.key] = column
        columns[_camel_case(attr.key)] = column
    return columns


class QueryBuilder:
    """Builds AutoQuery descriptors from search criteria."""

    INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")

    def __init__(self) -> None:
        self._columns = _equality_columns()

    def build(
        self,
        criteria: Mapping[str, Any] | None = None,
        pageable: Pageable | None = None,
    ) -> AutoQuery:
        """
        Build the search descriptor.

        Raises:
            InvalidCriteriaError: If a remaining key names no Auto column or
                its value does not convert to the column type.
        """
        remaining = {k: v for k, v in (criteria or {}).items() if v is not None}
        query = AutoQuery(pageable=pageable or Pageable())

        engine_name = remaining.pop(ENGINE_NAME, None)
        if isinstance(engine_name, str):
            pattern = f"%{escape_like_pattern(engine_name)}%"
            query.predicates.append(
                Predicate(ENGINE_NAME, engine_name, Engine.name.ilike(pattern, escape="\\"))
            )

        model_year = self._parse_int(remaining.pop(MODEL_YEAR_MIN, None))
        if model_year is not None:
            query.predicates.append(
                Predicate(MODEL_YEAR_MIN, model_year, Auto.model_year >= model_year)
            )

        price = self._parse_decimal(remaining.pop(PRICE_MAX, None))
        if price is not None:
            query.predicates.append(Predicate(PRICE_MAX, price, Auto.price <= price))

        for key, code in SafetyFeature.SEARCH_FLAGS:
            flag = remaining.pop(key, None)
            if flag is True or flag == "true":
                query.predicates.append(
                    Predicate(key, code, Auto.safety_features.contains(code, autoescape=True))
                )

        for key, value in remaining.items():
            column = self._columns.get(key)
            if column is None:
                raise InvalidCriteriaError(key)
            query.predicates.append(Predicate(key, value, column == self._coerce(key, column, value)))

        logger.debug(
            "Search query built",
            criteria=[p.key for p in query.predicates],
            size=query.pageable.size,
            number=query.pageable.number,
        )
        return query

    def _parse_int(self, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, str) and self.INTEGER_PATTERN.fullmatch(value.strip()):
            try:
                value = int(value)
            except ValueError:
                # more digits than int() converts
                return None
        if isinstance(value, int) and _fits_bigint(value):
            return value
        return None

    @staticmethod
    def _parse_decimal(value: Any) -> Decimal | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None

    @staticmethod
    def _coerce(key: str, column: Any, value: Any) -> Any:
        python_type = column.property.columns[0].type.python_type
        if isinstance(value, python_type) and not isinstance(value, int):
            return value
        try:
            if python_type is bool:
                raise ValueError(value)
            if python_type is Decimal:
                parsed = Decimal(str(value))
                if not parsed.is_finite():
                    raise ValueError(value)
                return parsed
            parsed = python_type(value)
            if isinstance(parsed, int) and not _fits_bigint(parsed):
                raise ValueError(value)
            return parsed
        except (TypeError, ValueError, InvalidOperation):
            raise InvalidCriteriaError(key, value)
