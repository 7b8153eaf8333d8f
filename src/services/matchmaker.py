"""
Pairing of waiting tickets into matches.
----

Two passes over the tickets, longest waiting first:

1. Pair with the first other ticket whose rating is close enough. The allowed gap grows the longer a ticket waits:
   100 points, +50 for every 10 seconds waited, capped at 400.
2. Whatever is left and has waited for over a minute gets paired regardless of rating.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_RATING = 1500.0

BASE_RATING_RANGE = 100
RANGE_INCREASE = 50
RANGE_INTERVAL_SECONDS = 10
MAX_RATING_RANGE = 400
FORCE_PAIR_AFTER_SECONDS = 60


@dataclass(frozen=True)
class Ticket:
    id: str
    rating: float = DEFAULT_RATING
    created_at: Optional[datetime] = None

    def wait_time(self, now: datetime) -> float:
        """Seconds waited. A ticket without a creation time has just been created."""
        if self.created_at is None:
            return 0.0
        created_at = self.created_at
        if created_at.tzinfo is None:
            # naive timestamps are UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return (now - created_at).total_seconds()


def rating_range(wait_seconds: float) -> int:
    additional_range = int(wait_seconds // RANGE_INTERVAL_SECONDS) * RANGE_INCREASE
    return min(BASE_RATING_RANGE + additional_range, MAX_RATING_RANGE)


def pair_tickets(
    tickets: list[Ticket], now: Optional[datetime] = None
) -> list[tuple[str, str]]:
    """Returns pairs of ticket IDs. A ticket is used in at most one pair."""
    now = now or datetime.now(timezone.utc)
    waits = {ticket.id: ticket.wait_time(now) for ticket in tickets}
    by_wait = sorted(tickets, key=lambda ticket: waits[ticket.id], reverse=True)

    pairs: list[tuple[str, str]] = []
    used: set[str] = set()

    # similar ratings
    for ticket in by_wait:
        if ticket.id in used:
            continue
        allowed_gap = rating_range(waits[ticket.id])
        opponent = next(
            (
                other
                for other in by_wait
                if other.id not in used
                and other.id != ticket.id
                and abs(other.rating - ticket.rating) <= allowed_gap
            ),
            None,
        )
        if opponent is not None:
            pairs.append((ticket.id, opponent.id))
            used.update({ticket.id, opponent.id})

    # waited too long: any opponent will do
    long_waiting = [
        ticket
        for ticket in by_wait
        if ticket.id not in used and waits[ticket.id] > FORCE_PAIR_AFTER_SECONDS
    ]
    for first, second in zip(long_waiting[::2], long_waiting[1::2]):
        pairs.append((first.id, second.id))

    logger.info("paired %d of %d tickets", 2 * len(pairs), len(tickets))
    return pairs
