"""
Password hashing utilities.

Wraps passlib's bcrypt scheme with a fixed cost factor.
"""

from passlib.context import CryptContext
from backend.app.core.config import settings


class PasswordHasher:
    """Salted bcrypt hashing with a configurable number of rounds."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password with a fresh random salt."""
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Compare a candidate password against a stored hash.

        A mismatch (or an unreadable stored hash) is a normal False outcome.
        """
        if not plaintext or not hashed:
            return False
        try:
            return self._context.verify(plaintext, hashed)
        except ValueError:
            return False

    def dummy_verify(self) -> bool:
        """Spend one verification's worth of work on a password that has no account."""
        self._context.dummy_verify()
        return False


password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
