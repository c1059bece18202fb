"""
Role-scoped authorization rules for tickets and comments.

Pure decision functions over the bound tenant user. Visibility is turned
into a query scope so list filtering happens in the database; the ensure_*
helpers guard mutations before any store call is issued.

    admin     every ticket in the company
    agent     tickets assigned to them
    customer  tickets they created
"""

from dataclasses import dataclass

from ticketdesk.core.exceptions import ForbiddenException
from ticketdesk.models.role import UserRole
from ticketdesk.models.ticket import Ticket
from ticketdesk.models.user import User


@dataclass(frozen=True)
class TicketScope:
    """Equality filters a ticket list query must apply for one user."""

    company_id: str
    customer_id: str | None = None
    assigned_to: str | None = None

    def matches(self, ticket: Ticket) -> bool:
        if ticket.company_id != self.company_id:
            return False
        if self.customer_id is not None and ticket.customer_id != self.customer_id:
            return False
        if self.assigned_to is not None and ticket.assigned_to != self.assigned_to:
            return False
        return True


def ticket_scope(user: User) -> TicketScope:
    """List visibility for a user, expressed as query filters."""
    if user.role == UserRole.ADMIN:
        return TicketScope(company_id=user.company_id)
    if user.role == UserRole.AGENT:
        return TicketScope(company_id=user.company_id, assigned_to=user.id)
    return TicketScope(company_id=user.company_id, customer_id=user.id)


def can_view_ticket(user: User, ticket: Ticket) -> bool:
    return ticket_scope(user).matches(ticket)


def can_change_status(user: User) -> bool:
    """Only staff move tickets between statuses."""
    return user.role.is_staff


def can_comment(user: User, ticket: Ticket) -> bool:
    """Anyone who can see a ticket may comment on it."""
    return can_view_ticket(user, ticket)


def can_post_internal(user: User) -> bool:
    return user.role.is_staff


def can_see_internal(user: User) -> bool:
    return user.role.is_staff


def can_create_ticket(user: User, company_id: str, customer_id: str) -> bool:
    """Tickets are raised in the user's own company, on their own behalf."""
    return user.company_id == company_id and user.id == customer_id


def can_assign(user: User) -> bool:
    return user.role == UserRole.ADMIN


def can_manage_users(user: User) -> bool:
    return user.role == UserRole.ADMIN


def ensure_can_change_status(user: User) -> None:
    if not can_change_status(user):
        raise ForbiddenException("Only admins and agents can change ticket status")


def ensure_can_comment(user: User, ticket: Ticket, is_internal: bool = False) -> None:
    if not can_comment(user, ticket):
        raise ForbiddenException("You do not have access to this ticket")
    if is_internal and not can_post_internal(user):
        raise ForbiddenException("Only admins and agents can post internal notes")


def ensure_can_create_ticket(user: User, company_id: str, customer_id: str) -> None:
    if not can_create_ticket(user, company_id, customer_id):
        raise ForbiddenException("Tickets can only be created for yourself in your own company")


def ensure_can_assign(user: User) -> None:
    if not can_assign(user):
        raise ForbiddenException("Only admins can assign tickets")


def ensure_can_manage_users(user: User) -> None:
    if not can_manage_users(user):
        raise ForbiddenException("Only admins can manage company users")
