"""
Car listing Pydantic schemas.

Defines request and response models for listing management.
"""

from datetime import datetime
from pydantic import AliasChoices, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from backend.app.models.enums import Transmission, Condition, FuelType, BodyType, CarStatus
from backend.app.schemas.common import CamelModel
from backend.app.schemas.dealer import DealerSummary

MIN_YEAR = 1900


def _max_year() -> int:
    return datetime.now().year + 1


def _check_year(value: Optional[int]) -> Optional[int]:
    if value is not None and not MIN_YEAR <= value <= _max_year():
        raise ValueError(f"year must be between {MIN_YEAR} and {_max_year()}")
    return value


class CarCreate(CamelModel):
    """
    Schema for creating a listing.

    The owning dealer is always taken from the authenticated identity, so any
    client-supplied ``dealer`` (or other unknown key) is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    year: int
    transmission: Transmission
    engine_size: str = Field(..., min_length=1, max_length=50)
    condition: Condition
    price: float = Field(..., ge=0)
    mileage: float = Field(..., ge=0)
    fuel_type: FuelType
    body_type: BodyType
    color: str = Field(..., min_length=1, max_length=50)
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    status: CarStatus = CarStatus.AVAILABLE

    @field_validator("year")
    @classmethod
    def year_in_range(cls, value):
        return _check_year(value)


class CarUpdate(CamelModel):
    """
    Full-document merge update of the mutable listing fields.

    Unknown fields (including ``dealer``) are rejected and explicit nulls
    are not allowed.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    make: Optional[str] = Field(None, min_length=1, max_length=100)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    year: Optional[int] = None
    transmission: Optional[Transmission] = None
    engine_size: Optional[str] = Field(None, min_length=1, max_length=50)
    condition: Optional[Condition] = None
    price: Optional[float] = Field(None, ge=0)
    mileage: Optional[float] = Field(None, ge=0)
    fuel_type: Optional[FuelType] = None
    body_type: Optional[BodyType] = None
    color: Optional[str] = Field(None, min_length=1, max_length=50)
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    status: Optional[CarStatus] = None

    @field_validator("year")
    @classmethod
    def year_in_range(cls, value):
        return _check_year(value)

    @model_validator(mode="after")
    def reject_nulls(self):
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class CarStatusUpdate(CamelModel):
    """
    Schema for PUT /cars/{id}/status.

    Kept as a plain string so the endpoint can answer with its own message.
    """
    status: Optional[str] = None


class _CarFields(CamelModel):
    id: str
    name: str
    make: str
    model: str
    year: int
    transmission: str
    engine_size: str
    condition: str
    price: float
    mileage: float
    fuel_type: str
    body_type: str
    color: str
    features: List[str]
    images: List[str]
    status: str
    created_at: datetime
    updated_at: datetime


class CarResponse(_CarFields):
    """Listing with ``dealer`` as the owning dealer id."""
    dealer_id: str = Field(
        validation_alias=AliasChoices("dealer_id", "dealer"),
        serialization_alias="dealer",
    )


class CarDetailResponse(_CarFields):
    """Listing with ``dealer`` populated as a dealer summary."""
    dealer: DealerSummary


class CarListResponse(CamelModel):
    """Paginated listing result."""
    cars: List[CarDetailResponse]
    page: int
    pages: int
    total: int


class DealerCarListResponse(CamelModel):
    """Paginated listings of a single dealer (dealer not populated)."""
    cars: List[CarResponse]
    page: int
    pages: int
    total: int
