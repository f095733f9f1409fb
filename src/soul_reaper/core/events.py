import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, TypeVar


T = TypeVar("T")


class EventBus:
    """Simple in-process event bus for game notifications.

    Subscribers are keyed by event class; events are emitted by instance.
    Dispatch is synchronous so a mutation and everything it notifies finish
    before the next input is processed.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._subscribers: Dict[Type[Any], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)  # type: ignore[arg-type]

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    self._subscribers.pop(event_type, None)

    def emit(self, event: Any) -> None:
        with self._lock:
            for event_type, handlers in list(self._subscribers.items()):
                if isinstance(event, event_type):
                    for h in list(handlers):
                        h(event)


@dataclass(frozen=True)
class SoulsChangedEvent:
    old_amount: int
    new_amount: int
    delta: int
    reason: str  # "click", "tick" or "purchase"


@dataclass(frozen=True)
class PurchaseCompletedEvent:
    upgrade_id: str
    cost: int
    owned: int
    remaining_souls: int


@dataclass(frozen=True)
class PurchaseFailedEvent:
    upgrade_id: str
    cost: int
    reason: str
    current_souls: int


@dataclass(frozen=True)
class PassiveUnitsChangedEvent:
    units: int


@dataclass(frozen=True)
class AchievementUnlocked:
    name: str
