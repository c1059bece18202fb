"""
Ticket status transitions and derived reporting values.

Any status may follow any other; the lifecycle only governs timestamps.
Entering RESOLVED records the first-reached watermark in resolved_at,
which is never cleared afterwards.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ticketdesk.models.base import utcnow
from ticketdesk.models.ticket import Ticket, TicketStatus

SECONDS_PER_HOUR = 60 * 60


@dataclass(frozen=True)
class TicketStats:
    total: int
    open: int
    in_progress: int
    resolved: int
    avg_resolution_hours: int | None

    @property
    def avg_resolution_label(self) -> str:
        if self.avg_resolution_hours is None:
            return "N/A"
        return f"{self.avg_resolution_hours}h"


def apply_status(ticket: Ticket, status: TicketStatus, now: datetime | None = None) -> Ticket:
    """
    Move a ticket to a new status in place.

    Args:
        ticket: Ticket to mutate
        status: Target status, any of the four values
        now: Transition time (defaults to current UTC time)

    Returns:
        The same ticket
    """
    now = now or utcnow()
    ticket.status = status
    ticket.updated_at = now
    if status == TicketStatus.RESOLVED and ticket.resolved_at is None:
        ticket.resolved_at = now
    return ticket


def touch(ticket: Ticket, now: datetime | None = None) -> Ticket:
    """Record activity on a ticket without changing its status."""
    ticket.updated_at = now or utcnow()
    return ticket


def average_resolution_hours(tickets: Iterable[Ticket]) -> int | None:
    """
    Mean time from creation to first resolution, in whole hours.

    Only tickets carrying both created_at and resolved_at count. Returns
    None when there is nothing to average.
    """
    durations = [
        (ticket.resolved_at - ticket.created_at).total_seconds()
        for ticket in tickets
        if ticket.created_at is not None and ticket.resolved_at is not None
    ]
    if not durations:
        return None
    mean_seconds = sum(durations) / len(durations)
    # Half-hours round up, matching the dashboard's display rounding
    return math.floor(mean_seconds / SECONDS_PER_HOUR + 0.5)


def summarize(tickets: list[Ticket]) -> TicketStats:
    """Dashboard counters over a list of tickets."""
    return TicketStats(
        total=len(tickets),
        open=sum(1 for t in tickets if t.status == TicketStatus.OPEN),
        in_progress=sum(1 for t in tickets if t.status == TicketStatus.IN_PROGRESS),
        resolved=sum(
            1 for t in tickets if t.status in (TicketStatus.RESOLVED, TicketStatus.CLOSED)
        ),
        avg_resolution_hours=average_resolution_hours(tickets),
    )
