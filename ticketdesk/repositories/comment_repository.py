from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.models.ticket import Ticket
from ticketdesk.models.ticket_comment import TicketComment
from ticketdesk.repositories.base import store_operation


class CommentRepository:
    """Repository for append-only ticket comments"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("list comments")
    async def get_by_ticket(
        self, ticket_id: str, include_internal: bool = True, limit: int = 100
    ) -> list[TicketComment]:
        """Get comments of a ticket in creation order"""
        query = select(TicketComment).where(TicketComment.ticket_id == ticket_id)
        if not include_internal:
            query = query.where(TicketComment.is_internal.is_(False))
        query = query.order_by(TicketComment.created_at.asc(), TicketComment.id.asc()).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    @store_operation("add comment")
    async def append(self, comment: TicketComment, ticket: Ticket) -> TicketComment:
        """
        Insert a comment and persist the parent ticket's touched timestamp
        in the same transaction.
        """
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        await self.db.refresh(ticket)
        return comment
