import uuid
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from eventspotter.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.db.models.user import User
from eventspotter.db.repositories import get_user
from eventspotter.core.security import decode_token, is_token_revoked

# HTTPBearer shows a simple "Authorize" button in Swagger UI where a JWT can be pasted
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    """
    Get current user from JWT token with revocation check.

    Raises:
        HTTPException: If token is invalid, revoked, or its user no longer exists
    """
    token = credentials.credentials

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if await is_token_revoked(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_token(token)
    except ValueError:
        raise credentials_exception

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject: Optional[str] = payload.get("sub")
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError:
        raise credentials_exception

    user = await get_user(session, user_id)
    if not user:
        raise credentials_exception
    return user
