"""Tests for translating query parameters into a product query."""
import pytest

from app.errors import ValidationError
from app.services.query_builder import (
    DEFAULT_SORT,
    FilterCondition,
    SortKey,
    build_product_query,
    parse_sort,
)


def test_defaults():
    query = build_product_query({})
    assert query.filters == ()
    assert query.sort == (SortKey("createdAt", descending=True),)
    assert query.page == 1
    assert query.limit == 10
    assert query.offset == 0


def test_offset_from_page_and_limit():
    query = build_product_query({"page": "3", "limit": "25"})
    assert query.page == 3
    assert query.limit == 25
    assert query.offset == 50


def test_category_and_price_range():
    query = build_product_query({"category": "tools", "minPrice": "5", "maxPrice": "15"})
    assert query.filters == (
        FilterCondition("category", "eq", "tools"),
        FilterCondition("price", "gte", 5.0),
        FilterCondition("price", "lte", 15.0),
    )


def test_price_bounds_are_independent():
    query = build_product_query({"maxPrice": "20"})
    assert query.filters == (FilterCondition("price", "lte", 20.0),)


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("false", False), ("TRUE", False), ("1", False), ("", False)],
)
def test_in_stock_only_true_string_is_true(raw, expected):
    query = build_product_query({"inStock": raw})
    assert query.filters == (FilterCondition("inStock", "eq", expected),)


def test_search_filter():
    query = build_product_query({"search": "  blue widget "})
    assert query.filters == (FilterCondition("search", "text", "blue widget"),)


def test_empty_values_are_ignored():
    query = build_product_query({"category": "", "search": "", "minPrice": "", "page": ""})
    assert query.filters == ()
    assert query.page == 1


def test_parse_sort_multiple_keys():
    assert parse_sort("price:asc,name:desc") == (
        SortKey("price", descending=False),
        SortKey("name", descending=True),
    )


def test_parse_sort_direction_defaults_to_ascending():
    assert parse_sort("price,name:DESC,category:sideways") == (
        SortKey("price"),
        SortKey("name"),
        SortKey("category"),
    )


def test_parse_sort_skips_unknown_fields():
    assert parse_sort("bogus:desc,price:desc") == (SortKey("price", descending=True),)


def test_parse_sort_falls_back_to_newest_first():
    assert parse_sort(None) == DEFAULT_SORT
    assert parse_sort("bogus:asc") == DEFAULT_SORT
    assert parse_sort(" , ") == DEFAULT_SORT


@pytest.mark.parametrize("params", [{"page": "0"}, {"limit": "-1"}, {"page": "abc"}, {"limit": "2.5"}])
def test_invalid_pagination_rejected(params):
    with pytest.raises(ValidationError) as exc_info:
        build_product_query(params)
    assert "must be a positive integer" in exc_info.value.errors[0]


@pytest.mark.parametrize("params", [{"minPrice": "cheap"}, {"maxPrice": "nan"}])
def test_invalid_price_bound_rejected(params):
    with pytest.raises(ValidationError) as exc_info:
        build_product_query(params)
    assert "must be a number" in exc_info.value.errors[0]


def test_limit_uncapped_by_default():
    assert build_product_query({"limit": "5000"}).limit == 5000


def test_limit_clamped_to_max():
    query = build_product_query({"limit": "5000", "page": "2"}, max_limit=100)
    assert query.limit == 100
    assert query.offset == 100


@pytest.mark.parametrize("name", ["page", "limit"])
def test_pagination_upper_bound(name):
    with pytest.raises(ValidationError) as exc_info:
        build_product_query({name: "99999999999999999999"})
    assert exc_info.value.errors == [f"{name} cannot exceed 2147483647"]


def test_largest_page_is_accepted():
    query = build_product_query({"page": "2147483647", "limit": "2147483647"})
    assert query.offset == 2147483646 * 2147483647


def test_category_is_trimmed():
    query = build_product_query({"category": "  tools "})
    assert query.filters == (FilterCondition("category", "eq", "tools"),)


def test_blank_category_is_ignored():
    assert build_product_query({"category": "   "}).filters == ()
