"""
Dealer directory API endpoints.

Public, paginated views of dealers and of a single dealer's listings.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.models.identifiers import normalize_id
from backend.app.schemas.car import CarResponse, DealerCarListResponse
from backend.app.schemas.dealer import DealerResponse, DealerListResponse
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.services.credential_store import CredentialStore
from backend.app.services.listing_query import ListingQuery, PageResult, Paging
from backend.app.services.listing_store import ListingStore

router = APIRouter(prefix="/dealers", tags=["Dealers"])


@router.get("", response_model=DealerListResponse)
async def list_dealers(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """List dealers, newest first (page, pageSize)."""
    paging = Paging.from_params(request.query_params)
    dealers, total = await CredentialStore(db).list(paging.offset, paging.limit)
    result = PageResult(items=dealers, page=paging.page, page_size=paging.page_size, total_count=total)

    return DealerListResponse(
        dealers=[DealerResponse.model_validate(dealer) for dealer in result.items],
        page=result.page,
        pages=result.total_pages,
        total=result.total_count,
    )


@router.get("/{dealer_id}", response_model=DealerResponse)
async def get_dealer(
    dealer_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a dealer's public profile."""
    dealer = await CredentialStore(db).get(dealer_id)
    if dealer is None:
        raise ResourceNotFoundError("Dealer", dealer_id)
    return DealerResponse.model_validate(dealer)


@router.get("/{dealer_id}/cars", response_model=DealerCarListResponse)
async def list_dealer_cars(
    dealer_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    List one dealer's listings, newest first.

    Same status default ("Available") and paging as GET /cars, without the
    other filters or a client-supplied sort. A malformed dealer id is 404.
    """
    normalized = normalize_id(dealer_id)
    if normalized is None:
        raise ResourceNotFoundError("Dealer", dealer_id)

    query = ListingQuery.for_dealer(normalized, request.query_params)
    result = await ListingStore(db).search(query)

    return DealerCarListResponse(
        cars=[CarResponse.model_validate(car) for car in result.items],
        page=result.page,
        pages=result.total_pages,
        total=result.total_count,
    )
