"""
Authentication dependencies for FastAPI.

This module provides the authorization gate that protects mutating routes:
bearer token -> verified dealer id -> dealer record.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.exceptions import AuthenticationError, DealerNotFoundError
from backend.app.core.jwt import TokenIssuer, get_token_issuer
from backend.app.db.session import get_db
from backend.app.models.dealer import Dealer
from backend.app.services.credential_store import CredentialStore

# HTTP Bearer security scheme (missing credentials are reported by the gate itself)
security = HTTPBearer(auto_error=False)


async def get_current_dealer(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: TokenIssuer = Depends(get_token_issuer),
    db: AsyncSession = Depends(get_db)
) -> Dealer:
    """
    FastAPI dependency resolving the request's bearer token to a dealer.

    Checks:
    1. A bearer token is present
    2. Token signature and expiry are valid
    3. The dealer referenced by the token still exists

    The resolved dealer is also attached to ``request.state.dealer``.
    The gate is read-only: tokens are never refreshed or rotated here.

    Raises:
        AuthenticationError: token missing
        InvalidTokenError / ExpiredTokenError: token rejected
        DealerNotFoundError: token is valid but its dealer is gone
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    dealer_id = issuer.verify(credentials.credentials)

    dealer = await CredentialStore(db).get(dealer_id)
    if dealer is None:
        raise DealerNotFoundError()

    request.state.dealer = dealer
    return dealer
