"""
Ownership guard for owner-only listing operations.

Callers must check that the record exists (404) before enforcing
ownership (403), so unauthorized dealers learn nothing extra.
"""

from backend.app.core.exceptions import ForbiddenError
from backend.app.models.dealer import Dealer


def verify_ownership(resource_owner_id: str, current_dealer: Dealer) -> bool:
    """True when the authenticated dealer is the resource's owner."""
    return resource_owner_id is not None and str(resource_owner_id) == str(current_dealer.id)


class OwnershipGuard:
    """
    Class-based ownership guard.

    Usage:
        ownership_guard = OwnershipGuard()

        car = await store.get(car_id)
        if car is None:
            raise ResourceNotFoundError("Car", car_id)
        ownership_guard.enforce(car.dealer_id, current_dealer, "update", "car")
    """

    def enforce(
        self,
        resource_owner_id: str,
        current_dealer: Dealer,
        action: str = "access",
        resource_name: str = "resource"
    ):
        """
        Enforce ownership validation.

        Raises:
            ForbiddenError if the dealer does not own the resource
        """
        if not verify_ownership(resource_owner_id, current_dealer):
            raise ForbiddenError(f"Not authorized to {action} this {resource_name}")
