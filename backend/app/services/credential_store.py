"""
Credential store for dealer accounts.

Persists dealer identity and a salted password hash; the plaintext
password never reaches the database.
"""

import logging
from typing import Any, Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.exceptions import DuplicateEmailError
from backend.app.core.security import PasswordHasher, password_hasher
from backend.app.models.dealer import Dealer
from backend.app.models.identifiers import normalize_id

logger = logging.getLogger("carsawa.credentials")


class CredentialStore:
    """Dealer persistence plus password hashing and verification."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher = password_hasher):
        self.db = db
        self.hasher = hasher

    async def create(self, dealer_data: Dict[str, Any]) -> Dealer:
        """
        Register a new dealer.

        Raises:
            DuplicateEmailError: a dealer with this email already exists
        """
        data = dict(dealer_data)
        if await self.find_by_email(data["email"]) is not None:
            raise DuplicateEmailError()

        data["hashed_password"] = self.hasher.hash(data.pop("password"))
        dealer = Dealer(**data)
        self.db.add(dealer)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a registration race on the unique email index
            await self.db.rollback()
            raise DuplicateEmailError()
        await self.db.refresh(dealer)

        logger.info("Dealer registered", extra={"dealer_id": dealer.id})
        return dealer

    async def find_by_email(self, email: str) -> Optional[Dealer]:
        result = await self.db.execute(select(Dealer).where(Dealer.email == email))
        return result.scalar_one_or_none()

    async def get(self, dealer_id: Any) -> Optional[Dealer]:
        """Look up a dealer by id; malformed ids are treated as not found."""
        dealer_id = normalize_id(dealer_id)
        if dealer_id is None:
            return None
        return await self.db.get(Dealer, dealer_id)

    def verify_password(self, dealer: Optional[Dealer], candidate: str) -> bool:
        """
        Check a login password.

        An unknown dealer costs the same bcrypt work as a real check and
        is always rejected.
        """
        if dealer is None:
            return self.hasher.dummy_verify()
        return self.hasher.verify(candidate, dealer.hashed_password)

    async def update_password(self, dealer: Dealer, new_plaintext: str) -> Dealer:
        dealer.hashed_password = self.hasher.hash(new_plaintext)
        await self.db.commit()
        await self.db.refresh(dealer)
        return dealer

    async def update_profile(self, dealer: Dealer, changes: Dict[str, Any]) -> Dealer:
        """
        Apply a partial profile update.

        ``location`` keys are merged into the stored location document and a
        password is only re-hashed when one is supplied.

        Raises:
            DuplicateEmailError: the new email belongs to another dealer
        """
        changes = dict(changes)

        new_email = changes.get("email")
        if new_email is not None and new_email != dealer.email:
            other = await self.find_by_email(new_email)
            if other is not None and other.id != dealer.id:
                raise DuplicateEmailError("Email already registered")

        if "location" in changes:
            changes["location"] = {**(dealer.location or {}), **changes["location"]}

        if "password" in changes:
            changes["hashed_password"] = self.hasher.hash(changes.pop("password"))

        for field, value in changes.items():
            setattr(dealer, field, value)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateEmailError("Email already registered")
        await self.db.refresh(dealer)
        return dealer

    async def list(self, offset: int, limit: int) -> tuple[list[Dealer], int]:
        """Page through the dealer directory, newest first."""
        total = (await self.db.execute(select(func.count(Dealer.id)))).scalar()
        query = (
            select(Dealer)
            .order_by(Dealer.created_at.desc(), Dealer.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total
