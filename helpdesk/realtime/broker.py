# helpdesk/realtime/broker.py
"""In-process change feed for the tickets table.

Ticket routes publish a ``TicketChange`` after every committed write;
each open ``/ws/tickets`` connection holds a ``Subscription`` and receives
the changes its viewer is allowed to see. Publishing happens from the
request worker threads, so messages are handed to each subscriber's event
loop with ``call_soon_threadsafe``.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass

from helpdesk.auth.models import UserRole
from helpdesk.tickets.services import can_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewer:
    id: int
    role: str
    company_id: int | None

    @classmethod
    def from_profile(cls, profile) -> "Viewer":
        return cls(id=profile.id, role=profile.role, company_id=profile.company_id)


@dataclass(frozen=True)
class TicketChange:
    event: str  # INSERT, UPDATE or DELETE
    ticket_id: int
    status: str | None
    customer_id: int
    assignee_id: int | None
    company_id: int | None
    previous_assignee_id: int | None = None

    @classmethod
    def from_ticket(cls, event: str, ticket, previous_assignee_id: int | None = None) -> "TicketChange":
        return cls(
            event=event,
            ticket_id=ticket.id,
            status=ticket.status,
            customer_id=ticket.customer_id,
            assignee_id=ticket.assignee_id,
            company_id=ticket.company_id,
            previous_assignee_id=previous_assignee_id,
        )

    def to_message(self) -> dict:
        return {
            "event": self.event,
            "table": "tickets",
            "ticket_id": self.ticket_id,
            "status": self.status,
        }


class Subscription:
    def __init__(self, viewer: Viewer, loop: asyncio.AbstractEventLoop):
        self.viewer = viewer
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue()

    def wants(self, change: TicketChange) -> bool:
        if can_view(self.viewer, change):
            return True
        # an agent still hears about a ticket taken away from them
        return (
            self.viewer.role == UserRole.AGENT.value
            and change.previous_assignee_id is not None
            and change.previous_assignee_id == self.viewer.id
        )


class TicketChangeFeed:
    def __init__(self):
        self._subscriptions: set[Subscription] = set()
        self._lock = threading.Lock()

    def subscribe(self, viewer: Viewer) -> Subscription:
        """Register a subscriber; must be called from the subscriber's event loop."""
        subscription = Subscription(viewer, asyncio.get_running_loop())
        with self._lock:
            self._subscriptions.add(subscription)
        logger.info("Viewer %s subscribed to ticket changes", viewer.id)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.discard(subscription)
        logger.info("Viewer %s unsubscribed from ticket changes", subscription.viewer.id)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, change: TicketChange) -> int:
        """Fan a change out to interested subscribers; returns how many got it."""
        with self._lock:
            subscriptions = list(self._subscriptions)

        delivered = 0
        message = change.to_message()
        for subscription in subscriptions:
            if not subscription.wants(change):
                continue
            try:
                subscription.loop.call_soon_threadsafe(subscription.queue.put_nowait, message)
            except RuntimeError:
                # event loop already closed
                logger.warning("Dropping subscriber %s with a closed loop", subscription.viewer.id)
                self.unsubscribe(subscription)
                continue
            delivered += 1
        logger.debug("Published %s for ticket %s to %d subscriber(s)", change.event, change.ticket_id, delivered)
        return delivered


change_feed = TicketChangeFeed()
