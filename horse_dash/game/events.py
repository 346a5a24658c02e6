# horse_dash/game/events.py
"""
Run events and a small synchronous pub/sub bus.

The simulation only emits; audio, UI and score keeping subscribe.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Type, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunStarted:
    pass


@dataclass(frozen=True)
class RunEnded:
    score: int


@dataclass(frozen=True)
class PlaneSpawned:
    name: str
    x: float
    y: float
    score: int


@dataclass(frozen=True)
class ScoreMilestone:
    score: int
    speed: float


RunEvent = Union[RunStarted, RunEnded, PlaneSpawned, ScoreMilestone]
Handler = Callable[[RunEvent], None]


class EventBus:
    """Dispatches events to handlers subscribed by event class."""

    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[type, List[Handler]] = defaultdict(list)
        self._global_handlers: List[Handler] = []
        self._history: List[RunEvent] = []
        self._history_limit = history_limit

    def subscribe(self, event_cls: Type, handler: Handler) -> Callable[[], None]:
        """Subscribe to one event class. Returns an unsubscribe function."""
        self._handlers[event_cls].append(handler)
        logger.debug("handler subscribed to %s", event_cls.__name__)

        def unsubscribe():
            if handler in self._handlers[event_cls]:
                self._handlers[event_cls].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        self._global_handlers.append(handler)

        def unsubscribe():
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: RunEvent):
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history.pop(0)

        for handler in list(self._handlers.get(type(event), [])) + list(self._global_handlers):
            try:
                handler(event)
            except Exception:
                # a broken listener must not stop the run
                logger.exception("error in handler for %s", type(event).__name__)

    def history(self, event_cls: Optional[Type] = None, limit: int = 10) -> List[RunEvent]:
        items = self._history
        if event_cls is not None:
            items = [e for e in items if isinstance(e, event_cls)]
        return items[-limit:]

    def clear_history(self):
        self._history.clear()
