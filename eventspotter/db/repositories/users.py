"""User persistence: registration and lookup."""
from typing import Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from eventspotter.db.models.user import User
from eventspotter.schemas import UserCreate
from eventspotter.core.security import hash_password


async def create_user(db: AsyncSession, user_in: UserCreate) -> User:
    """
    Create a new user with hashed password.

    Args:
        db: Database session
        user_in: User registration data

    Returns:
        Created User object
    """
    user = User(
        email=user_in.email,
        username=user_in.username,
        hashed_password=hash_password(user_in.password),
    )
    db.add(user)
    await db.commit()
    return user


async def get_user_by_identifier(db: AsyncSession, identifier: str) -> Optional[User]:
    """
    Retrieve a user by email address or username.

    Returns:
        User object if found, None otherwise
    """
    q = select(User).where(or_(User.email == identifier, User.username == identifier))
    res = await db.execute(q)
    return res.scalars().first()


async def find_conflicting_user(db: AsyncSession, email: str, username: str) -> Optional[User]:
    """Return any user already holding this email or username."""
    q = select(User).where(or_(User.email == email, User.username == username))
    res = await db.execute(q)
    return res.scalars().first()


async def get_user(db: AsyncSession, user_id) -> Optional[User]:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalars().first()
