"""Authentication service for user management and JWT token operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from eventspotter.schemas import UserCreate, LoginRequest
from eventspotter.db.repositories import (
    create_user as db_create_user,
    find_conflicting_user as db_find_conflicting_user,
    get_user_by_identifier as db_get_user_by_identifier,
)
from eventspotter.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    revoke_token,
    validate_password,
    verify_password,
)
from eventspotter.core.logging import logger
from fastapi import HTTPException, status


class AuthService:
    """
    Service layer for authentication operations.

    Handles user registration, login, token refresh, and logout operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def register(self, payload: UserCreate):
        """
        Register a new user.

        Raises:
            HTTPException: 400 if the password is too weak, 409 if the email
                or username is taken
        """
        try:
            validate_password(payload.password)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        existing = await db_find_conflicting_user(self.session, payload.email, payload.username)
        if existing:
            logger.info(f"Registration rejected: {payload.email} / {payload.username} already exists")
            raise HTTPException(status_code=409, detail="User with this username or email already exists")

        try:
            user = await db_create_user(self.session, payload)
        except IntegrityError:
            await self.session.rollback()
            raise HTTPException(status_code=409, detail="User with this username or email already exists")

        logger.info(f"User {user.id} registered as {user.username}")
        return user

    async def login(self, form_data: LoginRequest):
        """
        Authenticate by email or username and issue access and refresh tokens.

        Raises:
            HTTPException: If credentials are invalid
        """
        user = await db_get_user_by_identifier(self.session, form_data.identifier)
        if not user or not verify_password(form_data.password, user.hashed_password):
            logger.info(f"Login failed for {form_data.identifier}")
            raise HTTPException(status_code=401, detail="Invalid credentials")

        token_data = {"sub": str(user.id), "username": user.username}
        return {
            "access_token": create_access_token(token_data),
            "refresh_token": create_refresh_token(token_data),
            "token_type": "bearer"
        }

    async def refresh_access_token(self, refresh_token: str):
        """
        Generate a new access token using a valid refresh token.

        Raises:
            HTTPException: If refresh token is invalid or wrong token type
        """
        try:
            token_data = decode_token(refresh_token)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token"
            )

        if token_data.get("type") != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token type"
            )

        user_data = {"sub": token_data["sub"], "username": token_data.get("username")}
        return {
            "access_token": create_access_token(user_data),
            "token_type": "bearer"
        }

    async def logout(self, token: str):
        """Revoke the caller's access token."""
        await revoke_token(token)
