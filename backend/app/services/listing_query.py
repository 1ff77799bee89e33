"""
Listing query engine.

Translates the filter/sort/paging parameters of a listing request into a
deterministic, bounded query. Parsing is pure; the SQLAlchemy clauses it
produces are executed by the listing store.

Behaviour:
- Equality filters (make, model, dealer, condition, transmission,
  bodyType, fuelType) narrow to exact matches and are not validated
  against the listing enums.
- minPrice/maxPrice and minYear/maxYear are inclusive bounds.
- status defaults to "Available"; any explicit value overrides it as-is.
- sort is a field name, "-" prefix for descending; default is newest
  first. Every ordering ends with id ascending so paging is stable.
- page defaults to 1, pageSize to the configured default and is clamped
  to the configured maximum.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar
from sqlalchemy import ColumnElement
from backend.app.core.config import settings
from backend.app.core.exceptions import ValidationError
from backend.app.models.car import Car
from backend.app.models.enums import CarStatus

T = TypeVar("T")

DEFAULT_STATUS = CarStatus.AVAILABLE.value

# query parameter -> Car column attribute
EQUALITY_FILTERS: Dict[str, str] = {
    "make": "make",
    "model": "model",
    "dealer": "dealer_id",
    "condition": "condition",
    "transmission": "transmission",
    "bodyType": "body_type",
    "fuelType": "fuel_type",
}

SORTABLE_FIELDS: Dict[str, str] = {
    "name": "name",
    "make": "make",
    "model": "model",
    "year": "year",
    "price": "price",
    "mileage": "mileage",
    "color": "color",
    "status": "status",
    "transmission": "transmission",
    "condition": "condition",
    "dealer": "dealer_id",
    "dealer_id": "dealer_id",
    "engineSize": "engine_size",
    "engine_size": "engine_size",
    "fuelType": "fuel_type",
    "fuel_type": "fuel_type",
    "bodyType": "body_type",
    "body_type": "body_type",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}


def _positive_int(raw: Optional[str], default: int) -> int:
    # Absent, non-numeric and non-positive values fall back to the default
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def _number(params: Mapping[str, str], name: str, cast=float) -> Optional[float]:
    raw = params.get(name)
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return cast(str(raw).strip())
    except ValueError:
        raise ValidationError(
            f"Invalid value for {name}",
            errors=[{"loc": ["query", name], "msg": f"{name} must be a number", "input": raw}],
        )


@dataclass(frozen=True)
class Paging:
    """1-based page number and bounded page size."""
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str],
        default_page_size: Optional[int] = None,
        max_page_size: Optional[int] = None,
    ) -> "Paging":
        default_page_size = default_page_size or settings.default_page_size
        max_page_size = max_page_size or settings.max_page_size
        page = _positive_int(params.get("page"), 1)
        page_size = _positive_int(params.get("pageSize", params.get("page_size")), default_page_size)
        return cls(page=page, page_size=min(page_size, max_page_size))


@dataclass(frozen=True)
class SortSpec:
    column: str = "created_at"
    descending: bool = True

    @classmethod
    def parse(cls, raw: Optional[str]) -> "SortSpec":
        if raw is None or not raw.strip():
            return cls()
        raw = raw.strip()
        descending = raw.startswith("-")
        name = raw[1:] if descending else raw
        column = SORTABLE_FIELDS.get(name)
        if column is None:
            raise ValidationError(
                f"Cannot sort by '{name}'",
                errors=[{
                    "loc": ["query", "sort"],
                    "msg": f"sort must be one of: {', '.join(sorted(set(SORTABLE_FIELDS)))}",
                    "input": raw,
                }],
            )
        return cls(column=column, descending=descending)


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """Items of one page plus the totals computed against the same filter."""
    items: List[T]
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0


@dataclass(frozen=True)
class ListingQuery:
    """Normalized listing query."""
    equals: Tuple[Tuple[str, str], ...] = ()
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    status: str = DEFAULT_STATUS
    sort: SortSpec = field(default_factory=SortSpec)
    paging: Paging = field(default_factory=Paging)

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "ListingQuery":
        """Build the full public query from raw query-string parameters."""
        equals = tuple(
            (column, params[name])
            for name, column in EQUALITY_FILTERS.items()
            if params.get(name)
        )
        return cls(
            equals=equals,
            min_price=_number(params, "minPrice"),
            max_price=_number(params, "maxPrice"),
            min_year=_number(params, "minYear", int),
            max_year=_number(params, "maxYear", int),
            status=params.get("status") or DEFAULT_STATUS,
            sort=SortSpec.parse(params.get("sort")),
            paging=Paging.from_params(params),
        )

    @classmethod
    def for_dealer(cls, dealer_id: str, params: Mapping[str, str]) -> "ListingQuery":
        """Single-dealer view: status default and paging only, newest first."""
        return cls(
            equals=(("dealer_id", dealer_id),),
            status=params.get("status") or DEFAULT_STATUS,
            paging=Paging.from_params(params),
        )

    def where_clauses(self) -> List[ColumnElement[bool]]:
        clauses = [getattr(Car, column) == value for column, value in self.equals]
        if self.min_price is not None:
            clauses.append(Car.price >= self.min_price)
        if self.max_price is not None:
            clauses.append(Car.price <= self.max_price)
        if self.min_year is not None:
            clauses.append(Car.year >= self.min_year)
        if self.max_year is not None:
            clauses.append(Car.year <= self.max_year)
        clauses.append(Car.status == self.status)
        return clauses

    def order_by(self) -> List[Any]:
        column = getattr(Car, self.sort.column)
        primary = column.desc() if self.sort.descending else column.asc()
        return [primary, Car.id.asc()]

    def page_of(self, items: List[T], total_count: int) -> PageResult[T]:
        return PageResult(
            items=items,
            page=self.paging.page,
            page_size=self.paging.page_size,
            total_count=total_count,
        )
