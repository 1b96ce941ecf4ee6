"""Repository for user operations."""

from datetime import date
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.user.models import User
from components.user.schemas import UserCreate, UserUpdate
from components.core.security import get_password_hash


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user."""
        db_user = User(
            email=user.email.strip().lower(),
            full_name=user.full_name,
            phone=user.phone,
            password=get_password_hash(user.password),
            registration_date=date.today()
        )
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def exists(self, email: str) -> bool:
        """Check if user with given email exists."""
        result = await self.session.execute(
            select(User.id).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none() is not None

    async def update(self, user_id: int, user: UserUpdate) -> Optional[User]:
        """Update profile fields of a user."""
        db_user = await self.get_by_id(user_id)
        if not db_user:
            return None

        if user.full_name is not None:
            db_user.full_name = user.full_name
        if user.phone is not None:
            db_user.phone = user.phone
        if user.password:
            db_user.password = get_password_hash(user.password)

        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def set_password(self, user_id: int, password: str) -> bool:
        """Replace a user's password. Returns False if the user is gone."""
        db_user = await self.get_by_id(user_id)
        if not db_user:
            return False
        db_user.password = get_password_hash(password)
        await self.session.commit()
        return True
