from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.models.user import User
from ticketdesk.repositories.base import store_operation


class UserRepository:
    """Repository for tenant User operations. Every query is company scoped."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("fetch user")
    async def get_by_id_and_company(self, user_id: str, company_id: str) -> User | None:
        """
        Get user ensuring it belongs to the company (multi-tenant safety).

        Returns None if user doesn't exist or belongs to another company.
        """
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.company_id == company_id).limit(1)
        )
        return result.scalars().first()

    @store_operation("fetch user")
    async def find_by_email(self, company_id: str, email: str) -> list[User]:
        """
        Get users matching (company_id, email), oldest first.

        More than one row means the uniqueness invariant was broken
        upstream; callers decide how to report it.
        """
        result = await self.db.execute(
            select(User)
            .where(User.company_id == company_id, User.email == email.lower())
            .order_by(User.created_at.asc(), User.id.asc())
        )
        return list(result.scalars().all())

    @store_operation("list users")
    async def get_by_company(self, company_id: str) -> list[User]:
        """Get all users of a company, newest first"""
        result = await self.db.execute(
            select(User).where(User.company_id == company_id).order_by(User.created_at.desc())
        )
        return list(result.scalars().all())

    @store_operation("list users")
    async def get_all(self) -> list[User]:
        """Get users across every company (platform admin only)"""
        result = await self.db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @store_operation("create user")
    async def create(self, user: User) -> User:
        """
        Create new user.

        Raises:
            IntegrityError: If (company_id, email) already exists
        """
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    @store_operation("update user")
    async def update(self, user: User) -> User:
        """Update existing user"""
        await self.db.commit()
        await self.db.refresh(user)
        return user
