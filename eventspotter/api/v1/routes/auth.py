"""Authentication routes for registration, login, logout, token refresh and the current user."""
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from eventspotter.schemas import (
    EventListOut,
    EventOut,
    LoginRequest,
    RefreshTokenRequest,
    Token,
    TokenResponse,
    UserCreate,
    UserOut,
)
from eventspotter.services.auth_service import AuthService
from eventspotter.services.saved_event_service import SavedEventService
from eventspotter.db.session import get_session
from eventspotter.db.models.user import User
from eventspotter.auth import get_current_user
from eventspotter.core.rate_limit import limiter
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer()


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)


def get_saved_event_service(session: AsyncSession = Depends(get_session)) -> SavedEventService:
    return SavedEventService(session)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(
    request: Request,
    payload: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user account.

    Rate limit: 5 requests per minute
    """
    return await auth_service.register(payload)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    form_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login with email or username, returning access and refresh tokens.

    Rate limit: 10 requests per minute
    """
    return await auth_service.login(form_data)


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_access_token(
    request: Request,
    payload: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.refresh_access_token(payload.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Logout by revoking the current access token."""
    await auth_service.logout(credentials.credentials)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserOut)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/saved-events", response_model=EventListOut)
async def get_saved_events(
    current_user: User = Depends(get_current_user),
    saved_service: SavedEventService = Depends(get_saved_event_service)
):
    """Events saved by the current user, most recently saved first."""
    events = await saved_service.list_saved(current_user.id)
    return EventListOut(events=[EventOut.model_validate(ev) for ev in events])
