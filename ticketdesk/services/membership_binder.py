from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.exceptions import StoreOperationFailed
from ticketdesk.core.logging import get_logger
from ticketdesk.models.company import Company
from ticketdesk.models.principal import Principal
from ticketdesk.models.role import UserRole
from ticketdesk.models.user import User
from ticketdesk.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class MembershipBinder:
    """Binds an authenticated principal to its user record in one company"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def bind(self, principal: Principal, company: Company) -> User | None:
        """
        Find the company user for a principal.

        Flow:
        1. Look up users by (company.id, principal.email)
        2. Found: return the oldest active match
        3. Missing and the company allows self-provisioning: create an admin
        4. Missing otherwise: return None (access required)

        Store failures are logged and reported as "not bound".

        Args:
            principal: Authenticated identity
            company: Resolved, active company

        Returns:
            The bound User, or None
        """
        log = logger.bind(company_id=company.id, principal_id=principal.id)
        try:
            user = await self._find(principal, company)
            if user is not None and not user.is_active:
                log.info("membership_inactive", user_id=user.id)
                return None
            if user is not None:
                log.info("membership_bound", user_id=user.id, role=user.role.value)
                return user

            if not company.allows_self_provisioning:
                log.info("membership_missing")
                return None

            user = await self._provision(principal, company)
            log.info("membership_provisioned", user_id=user.id, role=user.role.value)
            return user
        except StoreOperationFailed as exc:
            log.error("membership_binding_failed", error=str(exc))
            return None

    async def _find(self, principal: Principal, company: Company) -> User | None:
        matches = await self.user_repo.find_by_email(company.id, principal.email)
        if len(matches) > 1:
            logger.warning(
                "duplicate_company_users",
                company_id=company.id,
                email=principal.email,
                user_ids=[u.id for u in matches],
            )
        return matches[0] if matches else None

    async def _provision(self, principal: Principal, company: Company) -> User:
        user = User(
            company_id=company.id,
            email=principal.email.lower(),
            name=principal.name or principal.email.split("@", 1)[0],
            role=UserRole.ADMIN,
        )
        try:
            return await self.user_repo.create(user)
        except IntegrityError:
            # Another sign-in provisioned the same email first. The rollback
            # expired every loaded instance, so reload the company.
            if company in self.db:
                await self.db.refresh(company)
            winner = await self._find(principal, company)
            if winner is None:
                raise StoreOperationFailed("provision user")
            return winner
