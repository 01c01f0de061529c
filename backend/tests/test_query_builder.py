"""
Tests for the search predicate builder and page requests.

Tests cover:
- Order in which predicates are applied
- Parsing of the typed criteria (year, price, safety flags)
- Exact-equality criteria and their coercion
- Pagination (LIMIT/OFFSET, size 0, defaults)
"""

from decimal import Decimal

import pytest

from auto_api.services.domain.query_builder import (
    AutoQuery,
    Pageable,
    QueryBuilder,
    create_pageable,
)
from shared.config.constants import AutoCategory, Limits
from shared.utils.exceptions import InvalidCriteriaError


@pytest.fixture
def builder():
    return QueryBuilder()


def run(db_session, query: AutoQuery) -> list[int]:
    return [a.id for a in db_session.scalars(query.statement()).unique()]


class TestPredicateOrder:
    """Predicates are appended in a fixed order, remaining keys last."""

    def test_all_categories_in_fixed_order(self, builder):
        query = builder.build(
            {
                "make": "VW",
                "parkingAssist": "true",
                "abs": "true",
                "priceMax": "40000",
                "modelYearMin": "2019",
                "engineName": "Del",
                "esb": "true",
                "airbag": "true",
            }
        )

        assert [p.key for p in query.predicates] == [
            "engineName",
            "modelYearMin",
            "priceMax",
            "esb",
            "abs",
            "airbag",
            "parkingAssist",
            "make",
        ]

    def test_remaining_keys_keep_mapping_order(self, builder):
        query = builder.build({"model": "Golf", "make": "VW", "modelYear": "2019"})
        assert [p.key for p in query.predicates] == ["model", "make", "modelYear"]

    def test_no_criteria_has_no_where_clause(self, builder):
        query = builder.build({})
        assert query.predicates == []
        assert query.where_clause() is None

    def test_none_values_are_ignored(self, builder):
        query = builder.build({"engineName": None, "make": None})
        assert query.predicates == []


class TestTypedCriteria:
    """engineName, modelYearMin, priceMax and the safety flags."""

    def test_engine_name_must_be_text(self, builder):
        query = builder.build({"engineName": 42})
        assert query.predicates == []

    def test_model_year_is_parsed(self, builder):
        query = builder.build({"modelYearMin": "2019"})
        assert query.predicates[0].value == 2019

    def test_invalid_model_year_is_skipped(self, builder):
        query = builder.build({"modelYearMin": "neunzehn"})
        assert query.predicates == []

    def test_price_is_parsed(self, builder):
        query = builder.build({"priceMax": "29999.99"})
        assert query.predicates[0].value == Decimal("29999.99")

    def test_model_year_beyond_bigint_is_skipped(self, builder):
        query = builder.build({"modelYearMin": "99999999999999999999"})
        assert query.predicates == []

    @pytest.mark.parametrize("price", ["billig", "NaN", "Infinity"])
    def test_invalid_price_is_skipped(self, builder, price):
        query = builder.build({"priceMax": price})
        assert query.predicates == []

    def test_flags_only_apply_when_true(self, builder):
        query = builder.build({"esb": "false", "abs": "true", "airbag": "yes"})
        assert [(p.key, p.value) for p in query.predicates] == [("abs", "ABS")]

    def test_flag_maps_to_feature_code(self, builder):
        query = builder.build({"parkingAssist": "true"})
        assert query.predicates[0].value == "PARKASSISTENT"


class TestEqualityCriteria:
    """Every other key is compared with the column of the same name."""

    def test_unknown_key_is_rejected(self, builder):
        with pytest.raises(InvalidCriteriaError) as exc_info:
            builder.build({"farbe": "rot"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.key == "farbe"

    def test_snake_and_camel_case_names(self, builder):
        query = builder.build({"chassisNumber": "X", "model_year": "2020"})
        assert [p.key for p in query.predicates] == ["chassisNumber", "model_year"]
        assert query.predicates[1].value == "2020"

    def test_uncoercible_value_is_rejected(self, builder):
        with pytest.raises(InvalidCriteriaError):
            builder.build({"modelYear": "zweitausend"})

    @pytest.mark.parametrize("value", ["99999999999999999999", "-9223372036854775809"])
    def test_integer_beyond_bigint_is_rejected(self, builder, value):
        with pytest.raises(InvalidCriteriaError) as exc_info:
            builder.build({"modelYear": value})
        assert exc_info.value.key == "modelYear"

    def test_enum_value_is_coerced(self, db_session, seed_autos, builder):
        ids = run(db_session, builder.build({"category": "SUV"}, Pageable(size=0)))
        assert ids == [3]
        assert seed_autos[2].category == AutoCategory.SUV


class TestSearchExecution:
    """Built queries against the demo data."""

    def test_engine_name_is_case_insensitive_substring(self, db_session, seed_autos, builder):
        assert run(db_session, builder.build({"engineName": "delta"})) == [2]
        assert run(db_session, builder.build({"engineName": "elt"})) == [2]

    def test_engine_name_wildcards_match_literally(self, db_session, seed_autos, builder):
        assert run(db_session, builder.build({"engineName": "%"})) == []
        assert run(db_session, builder.build({"engineName": "_"})) == []

    def test_year_and_flag_are_and_combined(self, db_session, seed_autos, builder):
        ids = run(db_session, builder.build({"modelYearMin": "2019", "abs": "true"}))
        assert ids == [1, 2]

    def test_price_is_upper_bound(self, db_session, seed_autos, builder):
        ids = run(db_session, builder.build({"priceMax": "32500"}, Pageable(size=0)))
        assert ids == [1, 2, 5]

    def test_every_auto_is_joined_with_engine(self, db_session, seed_autos, builder):
        autos = db_session.scalars(builder.build({}).statement()).unique().all()
        assert all(a.engine is not None for a in autos)

    def test_count_ignores_pagination(self, db_session, seed_autos, builder):
        query = builder.build({}, Pageable(size=2, number=0))
        assert len(run(db_session, query)) == 2
        assert db_session.scalar(query.count_statement()) == 5


class TestPagination:
    def test_limit_and_offset(self, db_session, seed_autos, builder):
        assert run(db_session, builder.build({}, Pageable(size=2, number=1))) == [3, 4]

    def test_size_zero_returns_everything(self, db_session, seed_autos, builder):
        assert run(db_session, builder.build({}, Pageable(size=0, number=3))) == [1, 2, 3, 4, 5]

    def test_defaults(self, builder):
        query = builder.build({})
        assert query.pageable.size == Limits.DEFAULT_PAGE_SIZE
        assert query.pageable.number == Limits.DEFAULT_PAGE_NUMBER

    def test_offset_is_number_times_size(self):
        assert Pageable(size=10, number=2).offset == 20


class TestCreatePageable:
    @pytest.mark.parametrize(
        "size, number, expected",
        [
            (None, None, (Limits.DEFAULT_PAGE_SIZE, Limits.DEFAULT_PAGE_NUMBER)),
            ("0", None, (0, 0)),
            ("10", "3", (10, 3)),
            ("500", "0", (Limits.MAX_PAGE_SIZE, 0)),
            ("-1", "-2", (Limits.DEFAULT_PAGE_SIZE, Limits.DEFAULT_PAGE_NUMBER)),
            ("viele", "erste", (Limits.DEFAULT_PAGE_SIZE, Limits.DEFAULT_PAGE_NUMBER)),
        ],
    )
    def test_parsing(self, size, number, expected):
        pageable = create_pageable(size, number)
        assert (pageable.size, pageable.number) == expected
