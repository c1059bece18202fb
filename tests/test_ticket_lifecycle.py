from datetime import UTC, datetime, timedelta

import pytest

from ticketdesk.models.ticket import Ticket, TicketStatus
from ticketdesk.services.ticket_lifecycle import (
    apply_status,
    average_resolution_hours,
    summarize,
    touch,
)

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def make_ticket(status=TicketStatus.OPEN, created_at=T0, resolved_at=None) -> Ticket:
    return Ticket(
        id="ticket_1",
        company_id="company_a",
        title="Printer broken",
        description="It jams",
        status=status,
        customer_id="user_1",
        created_at=created_at,
        updated_at=created_at,
        resolved_at=resolved_at,
    )


class TestApplyStatus:
    def test_sets_status_and_updated_at(self):
        ticket = make_ticket()
        now = T0 + timedelta(hours=1)

        apply_status(ticket, TicketStatus.IN_PROGRESS, now)

        assert ticket.status == TicketStatus.IN_PROGRESS
        assert ticket.updated_at == now
        assert ticket.resolved_at is None

    def test_entering_resolved_sets_watermark(self):
        ticket = make_ticket()
        now = T0 + timedelta(hours=3)

        apply_status(ticket, TicketStatus.RESOLVED, now)

        assert ticket.resolved_at == now

    def test_resolving_again_keeps_first_watermark(self):
        ticket = make_ticket()
        first = T0 + timedelta(hours=3)
        apply_status(ticket, TicketStatus.RESOLVED, first)

        apply_status(ticket, TicketStatus.RESOLVED, first + timedelta(hours=5))

        assert ticket.resolved_at == first

    def test_leaving_resolved_keeps_watermark(self):
        ticket = make_ticket()
        first = T0 + timedelta(hours=3)
        apply_status(ticket, TicketStatus.RESOLVED, first)

        apply_status(ticket, TicketStatus.OPEN, first + timedelta(hours=1))
        apply_status(ticket, TicketStatus.RESOLVED, first + timedelta(hours=2))

        assert ticket.status == TicketStatus.RESOLVED
        assert ticket.resolved_at == first

    @pytest.mark.parametrize("start", list(TicketStatus))
    @pytest.mark.parametrize("target", list(TicketStatus))
    def test_any_status_to_any_status(self, start, target):
        ticket = make_ticket(status=start)

        apply_status(ticket, target, T0 + timedelta(minutes=1))

        assert ticket.status == target

    def test_defaults_to_current_time(self):
        ticket = make_ticket()
        before = datetime.now(UTC)

        apply_status(ticket, TicketStatus.RESOLVED)

        assert before <= ticket.resolved_at <= datetime.now(UTC)


class TestTouch:
    def test_touch_updates_timestamp_only(self):
        ticket = make_ticket(status=TicketStatus.IN_PROGRESS)
        now = T0 + timedelta(days=1)

        touch(ticket, now)

        assert ticket.updated_at == now
        assert ticket.status == TicketStatus.IN_PROGRESS
        assert ticket.resolved_at is None


class TestAverageResolution:
    def test_unavailable_without_resolved_tickets(self):
        assert average_resolution_hours([]) is None
        assert average_resolution_hours([make_ticket(), make_ticket()]) is None

    def test_mean_in_whole_hours(self):
        tickets = [
            make_ticket(resolved_at=T0 + timedelta(hours=2)),
            make_ticket(resolved_at=T0 + timedelta(hours=5)),
            make_ticket(),
        ]

        # (2h + 5h) / 2 = 3.5h, rounded half up
        assert average_resolution_hours(tickets) == 4

    def test_rounds_down_below_half(self):
        tickets = [make_ticket(resolved_at=T0 + timedelta(hours=1, minutes=20))]

        assert average_resolution_hours(tickets) == 1

    def test_closed_ticket_with_watermark_counts(self):
        tickets = [make_ticket(status=TicketStatus.CLOSED, resolved_at=T0 + timedelta(hours=10))]

        assert average_resolution_hours(tickets) == 10


class TestSummarize:
    def test_counts_by_status(self):
        tickets = [
            make_ticket(TicketStatus.OPEN),
            make_ticket(TicketStatus.OPEN),
            make_ticket(TicketStatus.IN_PROGRESS),
            make_ticket(TicketStatus.RESOLVED, resolved_at=T0 + timedelta(hours=6)),
            make_ticket(TicketStatus.CLOSED, resolved_at=T0 + timedelta(hours=2)),
        ]

        stats = summarize(tickets)

        assert stats.total == 5
        assert stats.open == 2
        assert stats.in_progress == 1
        assert stats.resolved == 2
        assert stats.avg_resolution_hours == 4
        assert stats.avg_resolution_label == "4h"

    def test_empty_reports_unavailable(self):
        stats = summarize([])

        assert stats.total == 0
        assert stats.avg_resolution_hours is None
        assert stats.avg_resolution_label == "N/A"
