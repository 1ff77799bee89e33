"""
Authentication API endpoints.

Provides register, login, profile and password endpoints for dealers.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.models.dealer import Dealer
from backend.app.schemas.auth import DealerRegister, DealerLogin, AuthResponse, ProfileUpdate, PasswordChange
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.dealer import DealerResponse
from backend.app.core.exceptions import InvalidCredentialsError
from backend.app.core.jwt import TokenIssuer, get_token_issuer
from backend.app.core.dependencies import get_current_dealer
from backend.app.services.credential_store import CredentialStore
from backend.app.services.audit import log_auth_event, log_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _client_ip(request: Request):
    return request.client.host if request.client else None


def _auth_response(dealer: Dealer, token: str) -> AuthResponse:
    return AuthResponse(
        id=dealer.id,
        name=dealer.name,
        email=dealer.email,
        phone=dealer.phone,
        whatsapp=dealer.whatsapp,
        location=dealer.location,
        profile_image=dealer.profile_image,
        token=token,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    dealer_data: DealerRegister,
    request: Request,
    db: AsyncSession = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer)
):
    """
    Register a new dealer.

    The password is hashed before persistence. Returns 400 when the email
    is already registered.
    """
    store = CredentialStore(db)
    dealer = await store.create(dealer_data.model_dump(mode="json", exclude_none=True))

    await log_auth_event(
        db=db,
        action=AuditAction.DEALER_REGISTERED,
        dealer_id=dealer.id,
        email=dealer.email,
        ip_address=_client_ip(request)
    )

    return _auth_response(dealer, issuer.issue(dealer.id))


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: DealerLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer)
):
    """
    Login dealer and return a token.

    Unknown email and wrong password get the same 401 answer; both are
    recorded in the audit log.
    """
    store = CredentialStore(db)
    dealer = await store.find_by_email(credentials.email)

    if not store.verify_password(dealer, credentials.password):
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            dealer_id=dealer.id if dealer else None,
            email=credentials.email,
            ip_address=_client_ip(request),
            metadata={"reason": "Invalid password" if dealer else "Dealer not found"}
        )
        raise InvalidCredentialsError()

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        dealer_id=dealer.id,
        email=dealer.email,
        ip_address=_client_ip(request)
    )

    return _auth_response(dealer, issuer.issue(dealer.id))


@router.get("/me", response_model=DealerResponse)
async def get_current_dealer_info(
    current_dealer: Dealer = Depends(get_current_dealer)
):
    """
    Get the authenticated dealer's profile (without the password hash).
    """
    return DealerResponse.model_validate(current_dealer)


@router.put("/update-profile", response_model=DealerResponse)
async def update_profile(
    payload: ProfileUpdate,
    request: Request,
    current_dealer: Dealer = Depends(get_current_dealer),
    db: AsyncSession = Depends(get_db)
):
    """
    Update the authenticated dealer's profile.

    Location keys are merged into the stored location. A password given
    here is re-hashed; otherwise the stored hash is left untouched.
    """
    changes = payload.model_dump(mode="json", exclude_unset=True)
    if payload.location is not None:
        changes["location"] = payload.location.model_dump(mode="json", exclude_none=True)

    dealer = await CredentialStore(db).update_profile(current_dealer, changes)

    await log_event(
        db=db,
        action=AuditAction.PROFILE_UPDATED,
        actor_id=dealer.id,
        actor_email=dealer.email,
        target_id=dealer.id,
        metadata={"updated_fields": sorted(changes.keys())},
        ip_address=_client_ip(request)
    )

    return DealerResponse.model_validate(dealer)


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    request: Request,
    current_dealer: Dealer = Depends(get_current_dealer),
    db: AsyncSession = Depends(get_db)
):
    """
    Change the authenticated dealer's password.

    Requires the current password; the new one is hashed with a fresh salt.
    """
    store = CredentialStore(db)
    if not store.verify_password(current_dealer, payload.current_password):
        raise InvalidCredentialsError("Current password is incorrect")

    await store.update_password(current_dealer, payload.new_password)

    await log_event(
        db=db,
        action=AuditAction.PASSWORD_CHANGED,
        actor_id=current_dealer.id,
        actor_email=current_dealer.email,
        target_id=current_dealer.id,
        ip_address=_client_ip(request)
    )

    return MessageResponse(message="Password updated successfully")
