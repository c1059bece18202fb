from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ticketdesk.core.logging import get_logger
from ticketdesk.models.tenant_context import TenantContext
from ticketdesk.models.user import User
from ticketdesk.policies.ticket_policy import ensure_can_manage_users
from ticketdesk.repositories.user_repository import UserRepository
from ticketdesk.schemas.user_schemas import UserCreate, UserRoleUpdate

logger = get_logger(__name__)


class UserService:
    """Service layer for managing the users of one company"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def list_users(self, context: TenantContext) -> list[User]:
        """
        List company users.

        Staff see every user of their company; customers only themselves.
        """
        if not context.is_staff():
            return [context.user]
        return await self.user_repo.get_by_company(context.company.id)

    async def add_user(self, user_data: UserCreate, context: TenantContext) -> User:
        """
        Add a user to the current company (ADMIN only).

        Raises:
            ForbiddenException: If caller is not an admin
            ValidationException: If the email is already a member
        """
        ensure_can_manage_users(context.user)

        email = user_data.email.lower()
        if await self.user_repo.find_by_email(context.company.id, email):
            raise ValidationException(f"User {email} is already a member")

        user = User(
            company_id=context.company.id,
            email=email,
            name=user_data.name.strip(),
            role=user_data.role,
        )
        try:
            user = await self.user_repo.create(user)
        except IntegrityError:
            raise ValidationException(f"User {email} is already a member")

        logger.info("user_added", company_id=user.company_id, user_id=user.id, role=user.role.value)
        return user

    async def update_role(
        self, user_id: str, role_update: UserRoleUpdate, context: TenantContext
    ) -> User:
        """
        Change a user's role (ADMIN only).

        Raises:
            ForbiddenException: If caller is not an admin or targets themself
            NotFoundException: If user not in this company
        """
        ensure_can_manage_users(context.user)
        user = await self._get_member(user_id, context)

        if user.id == context.user.id:
            raise ForbiddenException("Cannot change your own role")

        user.role = role_update.role
        return await self.user_repo.update(user)

    async def deactivate(self, user_id: str, context: TenantContext) -> User:
        """
        Deactivate a user (ADMIN only). Users are never deleted.

        Raises:
            ForbiddenException: If caller is not an admin or targets themself
            NotFoundException: If user not in this company
        """
        ensure_can_manage_users(context.user)
        user = await self._get_member(user_id, context)

        if user.id == context.user.id:
            raise ForbiddenException("Cannot deactivate yourself")

        user.is_active = False
        user = await self.user_repo.update(user)
        logger.info("user_deactivated", company_id=user.company_id, user_id=user.id)
        return user

    async def _get_member(self, user_id: str, context: TenantContext) -> User:
        user = await self.user_repo.get_by_id_and_company(user_id, context.company.id)
        if user is None:
            raise NotFoundException("User not found in this company")
        return user
