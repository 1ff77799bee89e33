"""
Unit tests for listing query parsing.

These exercise parameter normalization only; query execution is covered
by the listing API tests.
"""

import pytest

from backend.app.core.exceptions import ValidationError
from backend.app.services.listing_query import ListingQuery, Paging, PageResult, SortSpec


def test_defaults():
    query = ListingQuery.from_params({})
    assert query.equals == ()
    assert query.status == "Available"
    assert query.sort == SortSpec(column="created_at", descending=True)
    assert query.paging == Paging(page=1, page_size=10)


def test_equality_filters_map_to_columns():
    query = ListingQuery.from_params({
        "make": "Toyota",
        "bodyType": "SUV",
        "fuelType": "Diesel",
        "dealer": "abc",
        "color": "Red",
    })
    assert dict(query.equals) == {
        "make": "Toyota",
        "body_type": "SUV",
        "fuel_type": "Diesel",
        "dealer_id": "abc",
    }


def test_empty_filter_values_are_ignored():
    query = ListingQuery.from_params({"make": "", "model": ""})
    assert query.equals == ()


def test_explicit_status_overrides_default():
    assert ListingQuery.from_params({"status": "Sold"}).status == "Sold"
    assert ListingQuery.from_params({"status": "Bogus"}).status == "Bogus"


def test_numeric_ranges():
    query = ListingQuery.from_params({
        "minPrice": "5000", "maxPrice": "15000.5", "minYear": "2010", "maxYear": "2020"
    })
    assert query.min_price == 5000.0
    assert query.max_price == 15000.5
    assert query.min_year == 2010
    assert query.max_year == 2020


@pytest.mark.parametrize("param", ["minPrice", "maxPrice", "minYear", "maxYear"])
def test_non_numeric_range_is_rejected(param):
    with pytest.raises(ValidationError) as exc_info:
        ListingQuery.from_params({param: "cheap"})
    assert exc_info.value.status_code == 400


def test_where_clauses_always_include_status():
    assert len(ListingQuery.from_params({}).where_clauses()) == 1
    assert len(ListingQuery.from_params({"make": "Toyota", "minPrice": "1"}).where_clauses()) == 3


@pytest.mark.parametrize("raw, expected", [
    ("price", SortSpec("price", False)),
    ("-year", SortSpec("year", True)),
    ("createdAt", SortSpec("created_at", False)),
    ("-updated_at", SortSpec("updated_at", True)),
    ("fuelType", SortSpec("fuel_type", False)),
    ("-bodyType", SortSpec("body_type", True)),
    ("transmission", SortSpec("transmission", False)),
    ("condition", SortSpec("condition", False)),
    ("engineSize", SortSpec("engine_size", False)),
    ("-engine_size", SortSpec("engine_size", True)),
    ("dealer", SortSpec("dealer_id", False)),
    (None, SortSpec("created_at", True)),
    ("  ", SortSpec("created_at", True)),
])
def test_sort_parsing(raw, expected):
    assert SortSpec.parse(raw) == expected


def test_unknown_sort_field():
    with pytest.raises(ValidationError) as exc_info:
        SortSpec.parse("-hashed_password")
    assert "hashed_password" in exc_info.value.message


def test_order_by_ends_with_id_tiebreak():
    order = ListingQuery.from_params({"sort": "-year"}).order_by()
    assert len(order) == 2
    assert "id" in str(order[1])
    assert "ASC" in str(order[1]).upper()


@pytest.mark.parametrize("params, expected", [
    ({"page": "3", "pageSize": "20"}, Paging(3, 20)),
    ({"page": "0"}, Paging(1, 10)),
    ({"page": "-2", "pageSize": "abc"}, Paging(1, 10)),
    ({"pageSize": "1000"}, Paging(1, 100)),
    ({"page_size": "5"}, Paging(1, 5)),
])
def test_paging_normalization(params, expected):
    assert Paging.from_params(params) == expected


def test_paging_offset():
    paging = Paging(page=3, page_size=20)
    assert paging.offset == 40
    assert paging.limit == 20


def test_dealer_view_ignores_search_filters():
    query = ListingQuery.for_dealer("dealer-1", {"make": "Toyota", "sort": "price", "page": "2"})
    assert query.equals == (("dealer_id", "dealer-1"),)
    assert query.sort == SortSpec()
    assert query.paging.page == 2


@pytest.mark.parametrize("total, size, pages", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 2, 13)])
def test_total_pages(total, size, pages):
    assert PageResult(items=[], page=1, page_size=size, total_count=total).total_pages == pages
