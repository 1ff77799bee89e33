"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import auth, cars, dealers, uploads

router = APIRouter()

# Dealer registration, login and profile
router.include_router(auth.router)

# Public dealer directory
router.include_router(dealers.router)

# Car listings
router.include_router(cars.router)

# Image uploads (external image host)
router.include_router(uploads.router)
