"""Typed interfaces for event-layer responsibilities."""

from typing import Protocol

from deployer.domain import Event


class EventHandlerPort(Protocol):
    """Port definition for external lifecycle event handlers."""

    def event_on_event(self, event: Event) -> None:
        """Handle one dispatched lifecycle event.

        Args:
            event: Typed event with payload.

        Returns:
            None: Handlers act through side effects.

        Raises:
            Exception: Any raised exception is reported as handler failure.
        """


class EventManagerPort(Protocol):
    """Port definition for process-wide event registration and dispatch."""

    def event_add_handler(self, handler: EventHandlerPort, event_type: str) -> None:
        """Register one handler under an event type key.

        Args:
            handler: Handler to invoke on matching events.
            event_type: Event type key.

        Returns:
            None: Registration is a side effect.

        Raises:
            ValueError: Raised when handler or event type is invalid.
        """

    def event_emit(self, event: Event) -> None:
        """Dispatch one event to every handler registered for its type.

        Args:
            event: Event to dispatch.

        Returns:
            None: Dispatch is a side effect.

        Raises:
            EventDispatchError: Raised after dispatch when any handler failed.
        """
