"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.models.user import User
from ..core.schemas.auth import DeleteAccountRequest, LoginRequest, RegisterRequest, TokenResponse, UserResponse
from ..core.schemas.common import SuccessResponse
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["authentication"])

# mounted without the /auth prefix
account_router = APIRouter(tags=["account"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Register a new user."""
    user = (await AuthService(session, settings).register_user(request)).unwrap()
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Exchange email + password for a bearer token."""
    issued = (await AuthService(session, settings).authenticate_user(request)).unwrap()
    return TokenResponse(
        access_token=issued.access_token,
        expires_in=issued.expires_in,
        user=UserResponse.model_validate(issued.user),
    )


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@account_router.post("/delete-account", response_model=SuccessResponse)
async def delete_account(
    request: DeleteAccountRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Permanently delete the caller's account and everything it owns."""
    (await AuthService(session, settings).delete_account(user.id, request.password)).unwrap()
    return SuccessResponse(message="Compte supprimé")
