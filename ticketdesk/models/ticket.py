from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ticketdesk.core.ids import new_id
from ticketdesk.models.base import Base, TimestampMixin, UTCDateTime


class TicketStatus(str, PyEnum):
    """Ticket status. Any status may follow any other."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketPriority(str, PyEnum):
    """Ticket priority enumeration"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


def _enum_values(enum_cls):
    return [e.value for e in enum_cls]


class Ticket(Base, TimestampMixin):
    """
    Support request raised by a company user.

    resolved_at is a watermark: the first time the ticket reached
    RESOLVED. Later transitions never clear it.
    """

    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: new_id("ticket"))
    company_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus, native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=TicketStatus.OPEN,
    )
    priority: Mapped[TicketPriority] = mapped_column(
        Enum(TicketPriority, native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=TicketPriority.MEDIUM,
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    customer_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    assigned_to: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=True, index=True
    )
    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    # Composite indexes for common queries
    __table_args__ = (
        Index("ix_tickets_company_created", "company_id", "created_at"),
        Index("ix_tickets_company_status", "company_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, company_id={self.company_id}, status={self.status.value})>"
