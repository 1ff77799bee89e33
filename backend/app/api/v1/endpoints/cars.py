"""
Car listing API endpoints.

Public listing search and detail; create for authenticated dealers;
update, status change and delete for the listing's owner only.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.models.dealer import Dealer
from backend.app.models.enums import CarStatus
from backend.app.schemas.car import (
    CarCreate, CarUpdate, CarStatusUpdate, CarResponse, CarDetailResponse, CarListResponse
)
from backend.app.schemas.common import MessageResponse
from backend.app.core.dependencies import get_current_dealer
from backend.app.core.exceptions import ResourceNotFoundError, ValidationError
from backend.app.core.guards import OwnershipGuard
from backend.app.services.listing_query import ListingQuery
from backend.app.services.listing_store import ListingStore
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/cars", tags=["Cars"])
ownership_guard = OwnershipGuard()


async def _owned_car(store: ListingStore, car_id: str, dealer: Dealer, action: str):
    # Existence is checked before ownership: missing -> 404, foreign -> 403
    car = await store.get(car_id)
    if car is None:
        raise ResourceNotFoundError("Car", car_id)
    ownership_guard.enforce(car.dealer_id, dealer, action, "car")
    return car


@router.get("", response_model=CarListResponse)
async def list_cars(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Search listings with filtering, sorting and pagination.

    Query parameters: make, model, dealer, condition, transmission, bodyType,
    fuelType, minPrice, maxPrice, minYear, maxYear, status (default
    "Available"), sort (field, "-" prefix for descending), page, pageSize.
    """
    query = ListingQuery.from_params(request.query_params)
    result = await ListingStore(db).search(query, with_dealer=True)

    return CarListResponse(
        cars=[CarDetailResponse.model_validate(car) for car in result.items],
        page=result.page,
        pages=result.total_pages,
        total=result.total_count,
    )


@router.get("/{car_id}", response_model=CarDetailResponse)
async def get_car(
    car_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get one listing with its dealer summary."""
    car = await ListingStore(db).get(car_id, with_dealer=True)
    if car is None:
        raise ResourceNotFoundError("Car", car_id)
    return CarDetailResponse.model_validate(car)


@router.post("", response_model=CarResponse, status_code=status.HTTP_201_CREATED)
async def create_car(
    car_data: CarCreate,
    current_dealer: Dealer = Depends(get_current_dealer),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a listing owned by the authenticated dealer.

    The dealer reference is always injected from the token's identity.
    """
    car = await ListingStore(db).create(current_dealer.id, car_data.model_dump(mode="json"))

    await log_event(
        db=db,
        action=AuditAction.CAR_CREATED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        target_id=car.id,
        metadata={"name": car.name, "make": car.make, "model": car.model}
    )

    return CarResponse.model_validate(car)


@router.put("/{car_id}", response_model=CarResponse)
async def update_car(
    car_id: str,
    car_data: CarUpdate,
    current_dealer: Dealer = Depends(get_current_dealer),
    db: AsyncSession = Depends(get_db)
):
    """Merge-update a listing (owner only)."""
    store = ListingStore(db)
    car = await _owned_car(store, car_id, current_dealer, "update")

    changes = car_data.model_dump(mode="json", exclude_unset=True)
    car = await store.update(car, changes)

    await log_event(
        db=db,
        action=AuditAction.CAR_UPDATED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        target_id=car.id,
        metadata={"updated_fields": sorted(changes.keys())}
    )

    return CarResponse.model_validate(car)


@router.put("/{car_id}/status", response_model=CarResponse)
async def update_car_status(
    car_id: str,
    status_data: CarStatusUpdate,
    current_dealer: Dealer = Depends(get_current_dealer),
    db: AsyncSession = Depends(get_db)
):
    """Change a listing's status (owner only)."""
    try:
        new_status = CarStatus(status_data.status)
    except ValueError:
        raise ValidationError("Please provide a valid status")

    store = ListingStore(db)
    car = await _owned_car(store, car_id, current_dealer, "update")

    previous = car.status
    car = await store.set_status(car, new_status.value)

    await log_event(
        db=db,
        action=AuditAction.CAR_STATUS_CHANGED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        target_id=car.id,
        metadata={"from": previous, "to": car.status}
    )

    return CarResponse.model_validate(car)


@router.delete("/{car_id}", response_model=MessageResponse)
async def delete_car(
    car_id: str,
    current_dealer: Dealer = Depends(get_current_dealer),
    db: AsyncSession = Depends(get_db)
):
    """Delete a listing (owner only)."""
    store = ListingStore(db)
    car = await _owned_car(store, car_id, current_dealer, "delete")
    deleted_id = car.id

    await store.delete(car)

    await log_event(
        db=db,
        action=AuditAction.CAR_DELETED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        target_id=deleted_id
    )

    return MessageResponse(message="Car removed")
