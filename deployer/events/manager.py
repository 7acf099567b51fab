"""In-process event manager with ordered, best-effort handler dispatch."""

from __future__ import annotations

import threading
from collections import defaultdict

from deployer.domain import Event

from .interfaces import EventHandlerPort, EventManagerPort


class EventDispatchError(RuntimeError):
    """Raised when one or more handlers failed while an event was dispatched.

    Attributes:
        event_type: Type of the dispatched event.
        handler_errors: Every handler failure in dispatch order.
    """

    def __init__(self, event_type: str, handler_errors: list[Exception]):
        last_error = handler_errors[-1]
        super().__init__(
            f"{len(handler_errors)} handler(s) failed for event {event_type}: {last_error}"
        )
        self.event_type = event_type
        self.handler_errors = list(handler_errors)


class EventManager(EventManagerPort):
    """Registry mapping event types to handlers invoked in registration order."""

    def __init__(self):
        """Initialize an empty handler registry.

        Returns:
            None: Initializer does not return a value.

        Raises:
            RuntimeError: This initializer does not raise runtime errors.
        """

        self._handlers: defaultdict[str, list[EventHandlerPort]] = defaultdict(list)
        self._lock = threading.Lock()

    def event_add_handler(self, handler: EventHandlerPort, event_type: str) -> None:
        """Register a handler; a type may hold several handlers.

        Args:
            handler: Handler exposing `event_on_event`.
            event_type: Event type key.

        Returns:
            None: Registration is a side effect.

        Raises:
            ValueError: Raised when handler is None or event type is blank.
        """

        if handler is None:
            raise ValueError("handler must not be None")
        normalized_event_type = event_type.strip()
        if not normalized_event_type:
            raise ValueError("event_type must not be blank")

        with self._lock:
            self._handlers[normalized_event_type].append(handler)

    def event_emit(self, event: Event) -> None:
        """Invoke every handler registered for the event type on the calling thread.

        All handlers run even when earlier ones fail. The raised error chains
        the last failure as its cause.

        Args:
            event: Event to dispatch.

        Returns:
            None: Dispatch is a side effect.

        Raises:
            EventDispatchError: Raised after dispatch when any handler failed.
        """

        with self._lock:
            handlers = tuple(self._handlers.get(event.event_type, ()))

        handler_errors: list[Exception] = []
        for handler in handlers:
            try:
                handler.event_on_event(event)
            except Exception as error:  # pylint: disable=broad-exception-caught
                handler_errors.append(error)

        if handler_errors:
            raise EventDispatchError(event.event_type, handler_errors) from handler_errors[-1]

    def event_handler_count(self, event_type: str) -> int:
        """Return how many handlers are registered for an event type."""

        with self._lock:
            return len(self._handlers.get(event_type, ()))
