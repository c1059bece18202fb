from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.models.ticket import Ticket, TicketPriority, TicketStatus
from ticketdesk.policies.ticket_policy import TicketScope
from ticketdesk.repositories.base import store_operation


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TicketRepository:
    """Repository for Ticket data access"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("create ticket")
    async def create(self, ticket: Ticket) -> Ticket:
        """Create a new ticket"""
        self.db.add(ticket)
        await self.db.commit()
        await self.db.refresh(ticket)
        return ticket

    @store_operation("fetch ticket")
    async def get_by_id_and_company(self, ticket_id: str, company_id: str) -> Ticket | None:
        """
        Get ticket by ID, ensuring it belongs to the company.

        Returns:
            Ticket object or None if not found or belongs to different company
        """
        result = await self.db.execute(
            select(Ticket).where(Ticket.id == ticket_id, Ticket.company_id == company_id).limit(1)
        )
        return result.scalars().first()

    @store_operation("list tickets")
    async def get_with_filters(
        self,
        scope: TicketScope,
        status: TicketStatus | None = None,
        priority: TicketPriority | None = None,
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Ticket]:
        """
        Get tickets visible under a scope, newest first.

        Args:
            scope: Company and role filters from the authorization policy
            status: Optional status filter
            priority: Optional priority filter
            search: Optional case-insensitive match on title or description
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            List of tickets
        """
        query = select(Ticket).where(Ticket.company_id == scope.company_id)

        if scope.customer_id is not None:
            query = query.where(Ticket.customer_id == scope.customer_id)

        if scope.assigned_to is not None:
            query = query.where(Ticket.assigned_to == scope.assigned_to)

        if status is not None:
            query = query.where(Ticket.status == status)

        if priority is not None:
            query = query.where(Ticket.priority == priority)

        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.where(
                or_(
                    Ticket.title.ilike(pattern, escape="\\"),
                    Ticket.description.ilike(pattern, escape="\\"),
                )
            )

        query = query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).limit(limit).offset(offset)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    @store_operation("list tickets")
    async def get_latest(self, limit: int) -> list[Ticket]:
        """Latest tickets across every company (platform admin only)"""
        result = await self.db.execute(
            select(Ticket).order_by(Ticket.created_at.desc(), Ticket.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    @store_operation("update ticket")
    async def update(self, ticket: Ticket) -> Ticket:
        """Update a ticket"""
        await self.db.commit()
        await self.db.refresh(ticket)
        return ticket
