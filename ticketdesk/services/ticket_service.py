from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.config import settings
from ticketdesk.core.exceptions import NotFoundException, ValidationException
from ticketdesk.core.logging import get_logger
from ticketdesk.models.base import utcnow
from ticketdesk.models.ticket import Ticket, TicketStatus
from ticketdesk.models.ticket_comment import TicketComment
from ticketdesk.models.tenant_context import TenantContext
from ticketdesk.policies import ticket_policy
from ticketdesk.repositories.comment_repository import CommentRepository
from ticketdesk.repositories.ticket_repository import TicketRepository
from ticketdesk.repositories.user_repository import UserRepository
from ticketdesk.schemas.ticket_schemas import (
    CommentCreate,
    TicketAssign,
    TicketCreate,
    TicketFilter,
)
from ticketdesk.services import ticket_lifecycle
from ticketdesk.services.ticket_lifecycle import TicketStats

logger = get_logger(__name__)

RECENT_TICKET_COUNT = 5


class TicketService:
    """Service layer for ticket business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.ticket_repo = TicketRepository(db)
        self.comment_repo = CommentRepository(db)
        self.user_repo = UserRepository(db)

    async def list_tickets(
        self, context: TenantContext, filters: TicketFilter | None = None
    ) -> list[Ticket]:
        """
        List tickets visible to the caller, newest first.

        Role scoping is applied in the query, never after the fact.
        """
        filters = filters or TicketFilter(limit=settings.TICKET_LIST_LIMIT)
        return await self.ticket_repo.get_with_filters(
            ticket_policy.ticket_scope(context.user),
            status=filters.status,
            priority=filters.priority,
            search=filters.search,
            limit=filters.limit,
            offset=filters.offset,
        )

    async def get_ticket(self, ticket_id: str, context: TenantContext) -> Ticket:
        """
        Get a ticket the caller can see.

        Raises:
            NotFoundException: If ticket is missing, in another company, or
                outside the caller's visibility
        """
        ticket = await self.ticket_repo.get_by_id_and_company(ticket_id, context.company.id)
        if ticket is None or not ticket_policy.can_view_ticket(context.user, ticket):
            raise NotFoundException(f"Ticket {ticket_id} not found or access denied")
        return ticket

    async def create_ticket(self, ticket_data: TicketCreate, context: TenantContext) -> Ticket:
        """
        Raise a new ticket as the caller, in the caller's company.

        Returns:
            Created ticket in OPEN status with no resolution watermark
        """
        user = context.user
        ticket_policy.ensure_can_create_ticket(user, context.company.id, user.id)

        now = utcnow()
        ticket = Ticket(
            company_id=context.company.id,
            title=ticket_data.title,
            description=ticket_data.description,
            priority=ticket_data.priority,
            category=ticket_data.category,
            status=TicketStatus.OPEN,
            customer_id=user.id,
            created_at=now,
            updated_at=now,
        )
        ticket = await self.ticket_repo.create(ticket)
        logger.info(
            "ticket_created",
            company_id=ticket.company_id,
            ticket_id=ticket.id,
            customer_id=ticket.customer_id,
            priority=ticket.priority.value,
        )
        return ticket

    async def change_status(
        self, ticket_id: str, status: TicketStatus, context: TenantContext
    ) -> Ticket:
        """
        Move a ticket to any status (ADMIN or AGENT).

        Raises:
            NotFoundException: If ticket not visible
            ForbiddenException: If caller may not change status
        """
        ticket_policy.ensure_can_change_status(context.user)
        ticket = await self.get_ticket(ticket_id, context)

        previous = ticket.status
        ticket_lifecycle.apply_status(ticket, status)
        ticket = await self.ticket_repo.update(ticket)
        logger.info(
            "ticket_status_changed",
            ticket_id=ticket.id,
            from_status=previous.value,
            to_status=ticket.status.value,
            actor_id=context.user.id,
        )
        return ticket

    async def assign_ticket(
        self, ticket_id: str, assignment: TicketAssign, context: TenantContext
    ) -> Ticket:
        """
        Assign a ticket to an admin or agent of the same company (ADMIN only).

        Raises:
            ForbiddenException: If caller is not an admin
            ValidationException: If assignee is not active staff of the company
        """
        ticket_policy.ensure_can_assign(context.user)
        ticket = await self.get_ticket(ticket_id, context)

        if assignment.assigned_to is not None:
            assignee = await self.user_repo.get_by_id_and_company(
                assignment.assigned_to, context.company.id
            )
            if assignee is None or not assignee.is_active or not assignee.role.is_staff:
                raise ValidationException("Tickets can only be assigned to active admins or agents")

        ticket.assigned_to = assignment.assigned_to
        ticket_lifecycle.touch(ticket)
        ticket = await self.ticket_repo.update(ticket)
        logger.info("ticket_assigned", ticket_id=ticket.id, assigned_to=ticket.assigned_to)
        return ticket

    async def add_comment(
        self, ticket_id: str, comment_data: CommentCreate, context: TenantContext
    ) -> TicketComment:
        """
        Append a comment and touch the ticket's updated_at.

        Raises:
            NotFoundException: If ticket not visible
            ForbiddenException: If a customer posts an internal note
        """
        ticket = await self.get_ticket(ticket_id, context)
        ticket_policy.ensure_can_comment(context.user, ticket, comment_data.is_internal)

        now = utcnow()
        comment = TicketComment(
            ticket_id=ticket.id,
            user_id=context.user.id,
            content=comment_data.content,
            is_internal=comment_data.is_internal,
            created_at=now,
        )
        ticket_lifecycle.touch(ticket, now)
        comment = await self.comment_repo.append(comment, ticket)
        logger.info(
            "ticket_comment_added",
            ticket_id=ticket.id,
            comment_id=comment.id,
            is_internal=comment.is_internal,
        )
        return comment

    async def list_comments(self, ticket_id: str, context: TenantContext) -> list[TicketComment]:
        """Comments in creation order; internal notes only for staff."""
        ticket = await self.get_ticket(ticket_id, context)
        return await self.comment_repo.get_by_ticket(
            ticket.id,
            include_internal=ticket_policy.can_see_internal(context.user),
            limit=settings.COMMENT_LIST_LIMIT,
        )

    async def dashboard(self, context: TenantContext) -> tuple[TicketStats, list[Ticket]]:
        """
        Counters and the most recent tickets within the caller's visibility.

        Returns:
            Tuple of (stats, recent tickets)
        """
        tickets = await self.list_tickets(
            context, TicketFilter(limit=settings.DASHBOARD_TICKET_LIMIT)
        )
        return ticket_lifecycle.summarize(tickets), tickets[:RECENT_TICKET_COUNT]
