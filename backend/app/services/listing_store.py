"""
Listing store.

Persists car listings and runs the bounded queries built by the listing
query engine. Every lookup-by-id treats a malformed id as "not found".
"""

from typing import Any, Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from backend.app.models.car import Car
from backend.app.models.identifiers import normalize_id, utcnow
from backend.app.services.listing_query import ListingQuery, PageResult


class ListingStore:
    """CRUD and query access to car listings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, dealer_id: str, data: Dict[str, Any]) -> Car:
        car = Car(**data, dealer_id=dealer_id)
        self.db.add(car)
        await self.db.commit()
        await self.db.refresh(car)
        return car

    async def get(self, car_id: Any, with_dealer: bool = False) -> Optional[Car]:
        car_id = normalize_id(car_id)
        if car_id is None:
            return None
        query = select(Car).where(Car.id == car_id)
        if with_dealer:
            query = query.options(selectinload(Car.dealer)).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def update(self, car: Car, changes: Dict[str, Any]) -> Car:
        """Merge the given fields into the listing; updated_at is always refreshed."""
        for field, value in changes.items():
            setattr(car, field, value)
        # onupdate only fires when a column value differs
        car.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(car)
        return car

    async def set_status(self, car: Car, status: str) -> Car:
        return await self.update(car, {"status": status})

    async def delete(self, car: Car) -> None:
        await self.db.delete(car)
        await self.db.commit()

    async def search(self, query: ListingQuery, with_dealer: bool = False) -> PageResult[Car]:
        """
        Run a listing query.

        The total count uses the same filter as the page, before paging.
        """
        clauses = query.where_clauses()

        count_query = select(func.count(Car.id)).where(*clauses)
        total = (await self.db.execute(count_query)).scalar() or 0

        page_query = (
            select(Car)
            .where(*clauses)
            .order_by(*query.order_by())
            .offset(query.paging.offset)
            .limit(query.paging.limit)
        )
        if with_dealer:
            page_query = page_query.options(selectinload(Car.dealer)).execution_options(populate_existing=True)

        result = await self.db.execute(page_query)
        return query.page_of(list(result.scalars().all()), total)
