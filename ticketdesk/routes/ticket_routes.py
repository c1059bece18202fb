from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.config import settings
from ticketdesk.database import get_db
from ticketdesk.dependencies import get_tenant_context
from ticketdesk.models.tenant_context import TenantContext
from ticketdesk.models.ticket import TicketPriority, TicketStatus
from ticketdesk.schemas.ticket_schemas import (
    CommentCreate,
    CommentResponse,
    DashboardResponse,
    TicketAssign,
    TicketCreate,
    TicketFilter,
    TicketResponse,
    TicketStatusUpdate,
)
from ticketdesk.services.ticket_service import TicketService

router = APIRouter()
dashboard_router = APIRouter()


@router.get("", response_model=list[TicketResponse])
async def list_tickets(
    status: Optional[TicketStatus] = Query(None),
    priority: Optional[TicketPriority] = Query(None),
    search: Optional[str] = Query(None, max_length=255),
    limit: int = Query(settings.TICKET_LIST_LIMIT, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    List tickets visible to the caller, newest first.

    - Admins see every company ticket
    - Agents see tickets assigned to them
    - Customers see tickets they raised
    """
    filters = TicketFilter(status=status, priority=priority, search=search, limit=limit, offset=offset)
    return await TicketService(db).list_tickets(context, filters)


@router.post("", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    ticket_data: TicketCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Raise a new ticket as the caller. Starts in OPEN status."""
    return await TicketService(db).create_ticket(ticket_data, context)


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a ticket. Tickets outside the caller's visibility are reported as missing."""
    return await TicketService(db).get_ticket(ticket_id, context)


@router.patch("/{ticket_id}/status", response_model=TicketResponse)
async def change_ticket_status(
    ticket_id: str,
    status_update: TicketStatusUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Move a ticket to any status.

    - **Requires ADMIN or AGENT role**
    - Entering RESOLVED the first time records resolved_at
    """
    return await TicketService(db).change_status(ticket_id, status_update.status, context)


@router.patch("/{ticket_id}/assignee", response_model=TicketResponse)
async def assign_ticket(
    ticket_id: str,
    assignment: TicketAssign,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Assign a ticket to an admin or agent, or clear the assignee.

    - **Requires ADMIN role**
    """
    return await TicketService(db).assign_ticket(ticket_id, assignment, context)


@router.get("/{ticket_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    ticket_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Comments in creation order. Internal notes are hidden from customers."""
    return await TicketService(db).list_comments(ticket_id, context)


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    ticket_id: str,
    comment_data: CommentCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Append a comment to a visible ticket.

    - Any role may comment
    - Only ADMIN and AGENT may post internal notes
    """
    return await TicketService(db).add_comment(ticket_id, comment_data, context)


@dashboard_router.get("", response_model=DashboardResponse)
async def get_dashboard(
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Ticket counters and the five most recent tickets.

    avg_resolution_hours is null (and avg_resolution_time "N/A") when no
    ticket has been resolved yet.
    """
    stats, recent = await TicketService(db).dashboard(context)
    return {
        "total_tickets": stats.total,
        "open_tickets": stats.open,
        "in_progress_tickets": stats.in_progress,
        "resolved_tickets": stats.resolved,
        "avg_resolution_hours": stats.avg_resolution_hours,
        "avg_resolution_time": stats.avg_resolution_label,
        "recent_tickets": recent,
    }
