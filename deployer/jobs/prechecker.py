"""Foundation availability precheck run before any foundation is touched."""

from __future__ import annotations

import logging
from typing import Final

import httpx

from deployer.domain import FOUNDATIONS_UNAVAILABLE_EVENT, Environment, Event, PrecheckerEventData
from deployer.events import EventDispatchError, EventManagerPort

from .deploy_errors import (
    AvailabilityError,
    FoundationUnavailableError,
    InvalidRequestError,
    NoFoundationsConfiguredError,
)
from .interfaces import PrecheckerPort

DEFAULT_PRECHECK_TIMEOUT_SECONDS: Final[float] = 15.0


class FoundationPrechecker(PrecheckerPort):
    """Request `/v2/info` from each foundation and stop at the first failure."""

    _INFO_PATH: Final[str] = "/v2/info"

    def __init__(
        self,
        event_manager: EventManagerPort,
        logger: logging.Logger,
        timeout_seconds: float = DEFAULT_PRECHECK_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize prechecker dependencies.

        Args:
            event_manager: Event manager notified when a foundation is unavailable.
            logger: Logger handle.
            timeout_seconds: Per-request timeout, bounding the wait for response headers.
            transport: Optional httpx transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if event_manager is None:
            raise ValueError("event_manager must not be None")
        if logger is None:
            raise ValueError("logger must not be None")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._event_manager = event_manager
        self._logger = logger
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def precheck_assert_all_foundations_up(self, environment: Environment) -> None:
        """Verify every foundation answers `/v2/info` with HTTP 200.

        Args:
            environment: Environment whose foundations are checked in order.

        Returns:
            None: Returns only when every foundation is up.

        Raises:
            NoFoundationsConfiguredError: Raised when the environment has no foundations.
            InvalidRequestError: Raised when an info request fails at transport level.
            FoundationUnavailableError: Raised when an info request returns a non-200 status.
        """

        if not environment.foundations:
            self._precheck_emit_unavailable(environment=environment, description="no foundations configured")
            raise NoFoundationsConfiguredError(environment_name=environment.name)

        with httpx.Client(
            verify=not environment.skip_ssl,
            timeout=httpx.Timeout(self._timeout_seconds),
            transport=self._transport,
        ) as client:
            for foundation_url in environment.foundations:
                try:
                    self._precheck_check_foundation(client=client, foundation_url=foundation_url)
                except AvailabilityError as error:
                    self._logger.error("precheck failed for %s: %s", foundation_url, error)
                    self._precheck_emit_unavailable(environment=environment, description=str(error))
                    raise

        self._logger.debug("all foundations up for environment %s", environment.name)

    def _precheck_check_foundation(self, client: httpx.Client, foundation_url: str) -> None:
        """Issue one info request against a foundation.

        Args:
            client: Shared httpx client for this precheck run.
            foundation_url: Foundation base URL.

        Returns:
            None: Returns when the foundation answered HTTP 200.

        Raises:
            InvalidRequestError: Raised for transport failures including timeouts.
            FoundationUnavailableError: Raised for non-200 responses.
        """

        info_url = f"{foundation_url.rstrip('/')}{self._INFO_PATH}"
        try:
            response = client.get(info_url)
        except httpx.TransportError as error:
            raise InvalidRequestError(foundation_url=foundation_url, cause=error) from error

        if response.status_code != httpx.codes.OK:
            status_text = f"{response.status_code} {response.reason_phrase}".strip()
            raise FoundationUnavailableError(foundation_url=foundation_url, status_text=status_text)

    def _precheck_emit_unavailable(self, environment: Environment, description: str) -> None:
        """Emit the foundation-unavailable event, logging handler failures.

        Args:
            environment: Environment being checked.
            description: Human-readable failure description.

        Returns:
            None: Event dispatch is a side effect.

        Raises:
            RuntimeError: Handler failures are logged, not raised.
        """

        event = Event(
            event_type=FOUNDATIONS_UNAVAILABLE_EVENT,
            data=PrecheckerEventData(environment=environment, description=description),
        )
        try:
            self._event_manager.event_emit(event)
        except EventDispatchError as error:
            self._logger.warning("event handlers failed for %s: %s", FOUNDATIONS_UNAVAILABLE_EVENT, error)
