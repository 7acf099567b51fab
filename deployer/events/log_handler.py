"""Event handler recording lifecycle events in the service log."""

import logging

from deployer.domain import DeploymentEventData, Event, PrecheckerEventData


class LoggingEventHandler:
    """Write one log line per dispatched lifecycle event."""

    def __init__(self, logger: logging.Logger):
        if logger is None:
            raise ValueError("logger must not be None")
        self._logger = logger

    def event_on_event(self, event: Event) -> None:
        """Log the event type with the identifying fields of its payload."""

        data = event.data
        if isinstance(data, PrecheckerEventData):
            self._logger.warning("event %s: %s: %s", event.event_type, data.environment.name, data.description)
            return
        if isinstance(data, DeploymentEventData):
            self._logger.info(
                "event %s: deployment %s of %s in %s: %s",
                event.event_type,
                data.deployment_info.uuid,
                data.deployment_info.app_name,
                data.environment_name,
                data.description,
            )
            return
        self._logger.info("event %s", event.event_type)
