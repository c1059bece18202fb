"""Tenant user role enum for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Roles a tenant user holds within one company.

    Permissions:
    - ADMIN: Sees every company ticket, changes status, assigns, manages users
    - AGENT: Sees tickets assigned to them, changes their status
    - CUSTOMER: Sees and comments on their own tickets, never changes status
    """

    ADMIN = "admin"
    AGENT = "agent"
    CUSTOMER = "customer"

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.AGENT)
