"""Tenant context for request authorization."""

from dataclasses import dataclass

from ticketdesk.models.company import Company
from ticketdesk.models.principal import Principal
from ticketdesk.models.role import UserRole
from ticketdesk.models.user import User


@dataclass(frozen=True)
class TenantContext:
    """
    Complete tenant context for authorization.

    Assembled once the principal is authenticated, the company is resolved
    and the principal is bound to a user record in that company. Passed
    explicitly to every service operation; replaced wholesale, never
    mutated, when the tenant or principal changes.

    Attributes:
        principal: The externally authenticated identity
        company: The Company resolved from the request origin
        user: The tenant user the principal is bound to
    """

    principal: Principal
    company: Company
    user: User

    @property
    def role(self) -> UserRole:
        return self.user.role

    def is_admin(self) -> bool:
        """Check if user is a company admin."""
        return self.user.role == UserRole.ADMIN

    def is_staff(self) -> bool:
        """Check if user is an admin or agent."""
        return self.user.role.is_staff

    def __repr__(self) -> str:
        return (
            f"<TenantContext(user_id={self.user.id}, company_id={self.company.id}, "
            f"role={self.user.role.value})>"
        )
