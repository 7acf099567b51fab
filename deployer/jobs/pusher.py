"""Per-foundation pusher driving login, rename, push, route, rollback, and commit."""

from __future__ import annotations

import enum
import logging

from deployer.adapters import CourierError, CourierPort
from deployer.domain import DeploymentInfo, domain_venerable_name

from .deploy_errors import AuthenticationError, LogRetrievalError, StateTransitionError
from .interfaces import PusherPort, ResponseStreamPort


class PusherState(str, enum.Enum):
    """Lifecycle states of one foundation's push session."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    RENAMED = "renamed"
    NEW_APP = "new_app"
    PUSHED = "pushed"
    ROUTE_MAPPED = "route_mapped"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class FoundationPusher(PusherPort):
    """Blue-green push session for one foundation and one deployment.

    The pusher is owned by exactly one orchestration task. It remembers whether
    it renamed a live app so commit and rollback only touch what it changed.
    """

    def __init__(self, courier: CourierPort, logger: logging.Logger, response: ResponseStreamPort):
        """Initialize pusher bound to one courier and the deployment response.

        Args:
            courier: Courier issuing commands against the foundation.
            logger: Logger handle.
            response: Response stream receiving output of rollback and commit steps.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are None.
        """

        if courier is None:
            raise ValueError("courier must not be None")
        if logger is None:
            raise ValueError("logger must not be None")
        if response is None:
            raise ValueError("response must not be None")

        self._courier = courier
        self._logger = logger
        self._response = response
        self._state = PusherState.UNAUTHENTICATED
        self._foundation_url = ""
        self._app_existed = False
        self._renamed = False
        self._cleaned_up = False

    @property
    def state(self) -> PusherState:
        """Return the current session state."""

        return self._state

    def pusher_has_renamed(self) -> bool:
        """Return whether this session renamed a live app to its venerable name."""

        return self._renamed

    def pusher_login(self, foundation_url: str, deployment_info: DeploymentInfo, response: ResponseStreamPort) -> None:
        """Log in to the foundation, forwarding courier output in every case.

        Args:
            foundation_url: Foundation API URL.
            deployment_info: Deployment carrying credentials, org, and space.
            response: Response stream receiving login output.

        Returns:
            None: Session becomes authenticated as a side effect.

        Raises:
            AuthenticationError: Raised when the courier login fails.
        """

        self._foundation_url = foundation_url
        self._logger.debug(
            "logging in to %s as %s (org=%s, space=%s, skip_ssl=%s)",
            foundation_url,
            deployment_info.username,
            deployment_info.org,
            deployment_info.space,
            deployment_info.skip_ssl,
        )
        try:
            output = self._courier.courier_login(
                foundation_url,
                deployment_info.username,
                deployment_info.password,
                deployment_info.org,
                deployment_info.space,
                deployment_info.skip_ssl,
            )
        except CourierError as error:
            self._pusher_write(response, error.output)
            self._logger.error("cannot login to %s: %s", foundation_url, error)
            raise AuthenticationError(foundation_url=foundation_url, cause=error) from error

        self._pusher_write(response, output)
        self._state = PusherState.AUTHENTICATED
        self._logger.info("logged in to %s", foundation_url)

    def pusher_exists(self, app_name: str) -> bool:
        """Return whether the app is already deployed on the foundation."""

        return self._courier.courier_exists(app_name)

    def pusher_push(
        self,
        app_path: str,
        app_exists: bool,
        deployment_info: DeploymentInfo,
        response: ResponseStreamPort,
    ) -> None:
        """Rename the live app if present, push the new bits, then map the route.

        Args:
            app_path: Directory holding extracted application bits.
            app_exists: Whether the app already exists on the foundation.
            deployment_info: Deployment carrying app name, instances, and domain.
            response: Response stream receiving courier output.

        Returns:
            None: Foundation hosts the new version as a side effect.

        Raises:
            StateTransitionError: Raised when rename, push, or route mapping fails.
        """

        app_name = deployment_info.app_name
        venerable_name = domain_venerable_name(app_name)
        self._app_existed = app_exists

        if app_exists:
            try:
                output = self._courier.courier_rename(app_name, venerable_name)
            except CourierError as error:
                self._pusher_write(response, error.output)
                self._logger.error("cannot rename %s to %s: %s", app_name, venerable_name, error)
                raise StateTransitionError(f"rename failed: {error}") from error
            self._pusher_write(response, output)
            self._renamed = True
            self._state = PusherState.RENAMED
            self._logger.info("renamed app from %s to %s", app_name, venerable_name)
        else:
            self._state = PusherState.NEW_APP
            self._logger.info("new app detected")

        self._logger.info("pushing app %s to %s", app_name, deployment_info.domain)
        self._logger.debug("tempdir for app %s: %s", app_name, app_path)
        try:
            output = self._courier.courier_push(app_name, app_path, deployment_info.instances)
        except CourierError as error:
            self._pusher_write(response, error.output)
            self._logger.error("push of %s failed: %s", app_name, error)
            raise self._pusher_failure_with_logs(app_name, str(error), response) from error
        self._pusher_write(response, output)
        self._state = PusherState.PUSHED
        self._logger.info("push succeeded")

        self._logger.info("mapping route for %s to %s", app_name, deployment_info.domain)
        try:
            output = self._courier.courier_map_route(app_name, deployment_info.domain)
        except CourierError as error:
            self._pusher_write(response, error.output)
            self._logger.error("route mapping of %s failed: %s", app_name, error)
            raise self._pusher_failure_with_logs(app_name, str(error), response) from error
        self._pusher_write(response, output)
        self._state = PusherState.ROUTE_MAPPED
        self._logger.info("mapped route for %s to %s", app_name, deployment_info.domain)

    def pusher_rollback(self, app_existed: bool, deployment_info: DeploymentInfo) -> None:
        """Delete the new app and rename the venerable copy back.

        Both compensating steps are attempted even when the first one fails.

        Args:
            app_existed: Whether a live app was renamed aside before the push.
            deployment_info: Deployment carrying the app name.

        Returns:
            None: Previous version is live again as a side effect.

        Raises:
            StateTransitionError: Raised when any compensating step failed.
        """

        app_name = deployment_info.app_name
        if not app_existed:
            self._logger.info("no previous version of %s to restore on %s", app_name, self._foundation_url)
            self._state = PusherState.ROLLED_BACK
            return

        venerable_name = domain_venerable_name(app_name)
        self._logger.info("rolling back deploy of %s", app_name)
        failures: list[str] = []

        try:
            self._pusher_write(self._response, self._courier.courier_delete(app_name))
            self._logger.info("deleted %s", app_name)
        except CourierError as error:
            self._pusher_write(self._response, error.output)
            self._logger.error("cannot delete %s: %s", app_name, error)
            failures.append(f"cannot delete {app_name}: {error}")

        try:
            self._pusher_write(self._response, self._courier.courier_rename(venerable_name, app_name))
            self._logger.info("renamed app from %s to %s", venerable_name, app_name)
        except CourierError as error:
            self._pusher_write(self._response, error.output)
            self._logger.error("cannot rename %s to %s: %s", venerable_name, app_name, error)
            failures.append(f"cannot rename {venerable_name} to {app_name}: {error}")

        if failures:
            raise StateTransitionError("; ".join(failures))
        self._renamed = False
        self._state = PusherState.ROLLED_BACK

    def pusher_delete_venerable(self, deployment_info: DeploymentInfo, foundation_url: str) -> None:
        """Delete the venerable app once the new version is live.

        Args:
            deployment_info: Deployment carrying the app name.
            foundation_url: Foundation the commit applies to.

        Returns:
            None: Venerable app is removed as a side effect.

        Raises:
            StateTransitionError: Raised when delete fails.
        """

        app_name = deployment_info.app_name
        if not self._renamed:
            self._logger.info("no venerable app to delete for %s on %s", app_name, foundation_url)
            self._state = PusherState.COMMITTED
            return

        venerable_name = domain_venerable_name(app_name)
        try:
            output = self._courier.courier_delete(venerable_name)
        except CourierError as error:
            self._pusher_write(self._response, error.output)
            self._logger.error("cannot delete %s on %s: %s", venerable_name, foundation_url, error)
            raise StateTransitionError(f"cannot delete {venerable_name}: {error}") from error
        self._pusher_write(self._response, output)
        self._state = PusherState.COMMITTED
        self._logger.info("deleted %s", venerable_name)

    def pusher_clean_up(self) -> None:
        """Release courier resources; repeated calls are no-ops.

        Returns:
            None: Courier resources are released as a side effect.

        Raises:
            OSError: Raised when the courier cannot remove its scratch resources.
        """

        if self._cleaned_up:
            return
        self._cleaned_up = True
        self._courier.courier_clean_up()

    def _pusher_failure_with_logs(
        self,
        app_name: str,
        message: str,
        response: ResponseStreamPort,
    ) -> StateTransitionError:
        """Fetch platform logs after a failure and build the error to raise.

        Retrieved logs go to the response. A log retrieval failure is chained
        after the primary message, never in place of it.

        Args:
            app_name: Application whose logs are fetched.
            message: Primary failure text.
            response: Response stream receiving the logs.

        Returns:
            StateTransitionError: Error carrying the primary failure.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        try:
            logs_output = self._courier.courier_logs(app_name)
        except CourierError as log_error:
            self._pusher_write(response, log_error.output)
            self._logger.error("cannot get logs for %s: %s", app_name, log_error)
            return StateTransitionError(message, log_error=LogRetrievalError(log_error))

        self._pusher_write(response, logs_output)
        return StateTransitionError(message)

    @staticmethod
    def _pusher_write(response: ResponseStreamPort, data: bytes | None) -> None:
        if data:
            response.write(data)
