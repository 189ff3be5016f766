"""
Issuance Ledger - Event Notifications

Notification records emitted by the ledger and the ownership registry, and
the sinks that receive them.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


# Events kept by an EventLog before the oldest are dropped
DEFAULT_MAX_EVENTS = 10000


class EventType(str, Enum):
    """Notification categories."""
    ASSET_CREATED = "asset_created"
    HOLDER_CHANGED = "holder_changed"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"
    PAUSED = "paused"
    UNPAUSED = "unpaused"
    WITHDRAWAL = "withdrawal"


@dataclass
class LedgerEvent:
    """A single notification."""
    event_type: EventType
    token_id: Optional[int] = None
    from_account: Optional[str] = None
    to_account: Optional[str] = None
    amount: Optional[int] = None
    timestamp: Optional[float] = None
    sequence: Optional[int] = None

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["event_type"] = self.event_type.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerEvent":
        fields = dict(data)
        fields["event_type"] = EventType(fields["event_type"])
        return cls(**fields)


def asset_created(token_id: int, to_account: str) -> LedgerEvent:
    return LedgerEvent(EventType.ASSET_CREATED, token_id=token_id, to_account=to_account)


def holder_changed(token_id: int, from_account: Optional[str], to_account: str) -> LedgerEvent:
    return LedgerEvent(
        EventType.HOLDER_CHANGED,
        token_id=token_id,
        from_account=from_account,
        to_account=to_account,
    )


class EventSink(ABC):
    """Receiver of ledger notifications."""

    @abstractmethod
    def emit(self, event: LedgerEvent) -> None:
        pass


class EventLog(EventSink):
    """
    In-memory, ordered event sink.

    Each received event is stamped with the next sequence number and logged
    at INFO level. At most max_events are retained; older ones are dropped
    while sequence numbering continues.
    """

    def __init__(
        self,
        events: Optional[List[LedgerEvent]] = None,
        max_events: Optional[int] = DEFAULT_MAX_EVENTS
    ):
        self.logger = logging.getLogger("ledger.events")
        self.max_events = max_events
        self._events: List[LedgerEvent] = list(events or [])
        self._next_sequence = max(
            (e.sequence for e in self._events if e.sequence is not None), default=0
        ) + 1
        self._trim()

    def _trim(self) -> None:
        if self.max_events is not None and len(self._events) > self.max_events:
            dropped = len(self._events) - self.max_events
            del self._events[:dropped]
            self.logger.debug(f"Dropped {dropped} old event(s)")

    def emit(self, event: LedgerEvent) -> None:
        event.sequence = self._next_sequence
        self._next_sequence += 1
        self._events.append(event)
        self.logger.info(
            f"{event.event_type.value} #{event.sequence}: token={event.token_id} "
            f"from={event.from_account} to={event.to_account} amount={event.amount}"
        )
        self._trim()

    def events(
        self,
        event_type: Optional[EventType] = None,
        token_id: Optional[int] = None
    ) -> List[LedgerEvent]:
        """Return recorded events, optionally filtered by type and token."""
        result = self._events
        if event_type is not None:
            result = [e for e in result if e.event_type == event_type]
        if token_id is not None:
            result = [e for e in result if e.token_id == token_id]
        return list(result)

    def __len__(self) -> int:
        return len(self._events)
