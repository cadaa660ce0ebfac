"""User repository for database operations."""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User, normalize_email


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(self, user_data: dict) -> User:
        """Create new user."""
        data = dict(user_data)
        data["email"] = normalize_email(data["email"])
        user = User(**data)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, compared trimmed and lower-cased."""
        stmt = select(User).where(func.lower(User.email) == normalize_email(email))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_user(self, user_id: int, update_data: dict) -> Optional[User]:
        """Update user data."""
        user = await self.get_by_id(user_id)
        if not user:
            return None

        for key, value in update_data.items():
            setattr(user, key, value)

        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def delete_user(self, user_id: int) -> bool:
        """Delete the account; owned rows go with it through ON DELETE CASCADE."""
        result = await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.commit()
        return bool(result.rowcount)

    async def is_email_taken(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def is_username_taken(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def list_users(self, page: int = 1, per_page: int = 20) -> tuple[list[User], int]:
        """List all users with pagination."""
        offset = (page - 1) * per_page

        total_result = await self.session.execute(select(func.count(User.id)))
        total_count = total_result.scalar()

        stmt = select(User).order_by(User.id).offset(offset).limit(per_page)
        result = await self.session.execute(stmt)
        return list(result.scalars()), total_count
