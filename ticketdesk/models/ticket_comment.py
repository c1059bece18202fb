from datetime import datetime
from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ticketdesk.core.ids import new_id
from ticketdesk.models.base import Base, UTCDateTime, utcnow


class TicketComment(Base):
    """
    Append-only comment on a ticket.

    Never edited or deleted, so there is no updated_at. Internal comments
    are staff notes hidden from customers.
    """

    __tablename__ = "ticket_comments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: new_id("comment"))
    ticket_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("tickets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_internal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)