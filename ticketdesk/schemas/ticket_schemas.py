from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from ticketdesk.models.ticket import TicketPriority, TicketStatus


class TicketCreate(BaseModel):
    """Schema for raising a new ticket"""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=10000)
    priority: TicketPriority = TicketPriority.MEDIUM
    category: Optional[str] = Field(None, max_length=100)

    @field_validator("title", "description")
    @classmethod
    def require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please fill in all required fields")
        return value

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class TicketStatusUpdate(BaseModel):
    """Move a ticket to any status"""

    status: TicketStatus


class TicketAssign(BaseModel):
    """Assign a ticket to a staff member, or unassign with null"""

    assigned_to: Optional[str] = None


class TicketResponse(BaseModel):
    """Schema for ticket response"""

    model_config = {"from_attributes": True}

    id: str
    company_id: str
    title: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    category: Optional[str]
    customer_id: str
    assigned_to: Optional[str]
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime]


class TicketFilter(BaseModel):
    """Schema for filtering tickets"""

    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    search: Optional[str] = Field(None, max_length=255)
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class CommentCreate(BaseModel):
    """Schema for appending a comment"""

    content: str = Field(..., min_length=1, max_length=10000)
    is_internal: bool = False

    @field_validator("content")
    @classmethod
    def require_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        return value


class CommentResponse(BaseModel):
    """Schema for comment response"""

    model_config = {"from_attributes": True}

    id: str
    ticket_id: str
    user_id: str
    content: str
    is_internal: bool
    created_at: datetime


class DashboardResponse(BaseModel):
    """Ticket counters and recent activity for the caller's visible tickets"""

    total_tickets: int
    open_tickets: int
    in_progress_tickets: int
    resolved_tickets: int
    avg_resolution_hours: Optional[int]
    avg_resolution_time: str
    recent_tickets: list[TicketResponse]
