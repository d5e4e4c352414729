"""
In-process event channel.

Services publish state changes here (queue status, statistics, preference
updates) and front ends subscribe instead of polling.
"""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from notecore.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class CoreEvent:
    """A single state-change notification."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    emitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "payload": self.payload,
            "emitted_at": self.emitted_at.isoformat(),
        }


EventHandler = Callable[[CoreEvent], None]


class EventBus:
    """Synchronous fan-out of core events to subscribers."""

    def __init__(self, history_size: int = 100):
        self._handlers: list[tuple[str | None, EventHandler]] = []
        self._history: deque[CoreEvent] = deque(maxlen=history_size)

    def subscribe(self, handler: EventHandler, name: str | None = None) -> Callable[[], None]:
        """
        Register a handler, optionally for a single event name.

        Returns:
            Callable that removes the subscription
        """
        entry = (name, handler)
        self._handlers.append(entry)

        def _unsubscribe() -> None:
            if entry in self._handlers:
                self._handlers.remove(entry)

        return _unsubscribe

    def publish(self, name: str, **payload: Any) -> CoreEvent:
        event = CoreEvent(name=name, payload=payload)
        self._history.append(event)

        for wanted, handler in list(self._handlers):
            if wanted is not None and wanted != name:
                continue
            try:
                handler(event)
            except Exception as e:
                # A broken subscriber must not break the publisher
                logger.error(
                    "Event handler failed",
                    event_name=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return event

    def recent(self, limit: int = 20) -> list[CoreEvent]:
        return list(self._history)[-limit:]
