"""
Dealer Pydantic schemas.

Defines the location document and the public dealer representations.
"""

from pydantic import Field
from datetime import datetime
from typing import Optional, List
from backend.app.schemas.common import CamelModel


class Coordinates(CamelModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude coordinate")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude coordinate")


class Location(CamelModel):
    """Dealer location document."""
    address: str = Field(..., min_length=1, max_length=500, description="Street address")
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    coordinates: Optional[Coordinates] = None


class LocationUpdate(CamelModel):
    """Partial location; provided keys are merged into the stored document."""
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    coordinates: Optional[Coordinates] = None


class DealerSummary(CamelModel):
    """Dealer fields embedded into populated listing responses."""
    id: str
    name: str
    email: str
    phone: str
    location: Location


class DealerResponse(CamelModel):
    """Full dealer profile (never includes the password hash)."""
    id: str
    name: str
    email: str
    phone: str
    whatsapp: str
    location: Location
    profile_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DealerListResponse(CamelModel):
    """Paginated dealer directory."""
    dealers: List[DealerResponse]
    page: int
    pages: int
    total: int
