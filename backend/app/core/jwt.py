"""
JWT token utilities for authentication.

This module provides the token issuer that mints and validates the
stateless, signed session token bound to a dealer id.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from backend.app.core.config import Settings, settings
from backend.app.core.exceptions import ExpiredTokenError, InvalidTokenError


class TokenIssuer:
    """
    Issues and verifies HS256-signed dealer tokens.

    Token payload:
        {
            "sub": "<dealer id>",
            "iat": 1234567890,
            "exp": 1234567890
        }

    Validity is decided purely by signature and expiry; there is no
    server-side revocation list.
    """

    def __init__(self, config: Settings):
        self._secret_key = config.secret_key
        self._algorithm = config.algorithm
        self._ttl = timedelta(minutes=config.access_token_expire_minutes)

    def issue(self, dealer_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token for a dealer.

        Args:
            dealer_id: Id of the dealer the token is bound to
            expires_delta: Optional custom lifetime (defaults to the configured TTL)

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._ttl)
        payload = {"sub": str(dealer_id), "iat": now, "exp": expire}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Validate a token and return the embedded dealer id.

        Raises:
            ExpiredTokenError: token is past its expiry
            InvalidTokenError: token is malformed, badly signed or lacks a subject
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise ExpiredTokenError()
        except JWTError:
            raise InvalidTokenError()

        dealer_id = payload.get("sub")
        if not dealer_id or not isinstance(dealer_id, str):
            raise InvalidTokenError("Invalid token payload")
        return dealer_id


token_issuer = TokenIssuer(settings)


def get_token_issuer() -> TokenIssuer:
    """FastAPI dependency returning the process-wide token issuer."""
    return token_issuer
