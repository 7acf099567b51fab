"""Factory binding a fresh courier and the deployment response to each pusher."""

from __future__ import annotations

import logging
from typing import Callable

from deployer.adapters import CourierPort
from deployer.domain import DeploymentInfo

from .interfaces import PusherCreatorPort, ResponseStreamPort
from .pusher import FoundationPusher


class PusherCreator(PusherCreatorPort):
    """Create one `FoundationPusher` per foundation task."""

    def __init__(self, courier_factory: Callable[[], CourierPort], logger: logging.Logger):
        """Initialize pusher creator.

        Args:
            courier_factory: Callable returning a new courier with its own scratch state.
            logger: Logger handle shared by created pushers.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are None.
        """

        if courier_factory is None:
            raise ValueError("courier_factory must not be None")
        if logger is None:
            raise ValueError("logger must not be None")

        self._courier_factory = courier_factory
        self._logger = logger

    def pusher_creator_create(self, deployment_info: DeploymentInfo, response: ResponseStreamPort) -> FoundationPusher:
        """Create a pusher bound to a new courier.

        Args:
            deployment_info: Deployment the pusher serves.
            response: Response stream bound for rollback and commit output.

        Returns:
            FoundationPusher: Pusher in the unauthenticated state.

        Raises:
            OSError: Raised when the courier cannot allocate scratch resources.
        """

        courier = self._courier_factory()
        self._logger.debug("created courier for deployment %s", deployment_info.uuid)
        return FoundationPusher(courier=courier, logger=self._logger, response=response)
