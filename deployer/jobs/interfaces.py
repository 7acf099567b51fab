"""Typed interfaces for job-layer orchestration responsibilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from deployer.domain import BlueGreenResult, DeploymentInfo, Environment

if TYPE_CHECKING:
    from .deploy_service import DeploymentOutcome, DeploymentRequest


class ResponseStreamPort(Protocol):
    """Port definition for the byte stream receiving live deployment output."""

    def write(self, data: bytes) -> int:
        """Append bytes to the deployment response.

        Returns:
            int: Number of bytes written.
        """


class PrecheckerPort(Protocol):
    """Port definition for fleet availability checks before a push."""

    def precheck_assert_all_foundations_up(self, environment: Environment) -> None:
        """Verify every foundation in the environment is reachable and healthy.

        Args:
            environment: Environment whose foundations are checked.

        Returns:
            None: Returns only when every foundation is up.

        Raises:
            ConfigurationError: Raised when no foundations are configured.
            AvailabilityError: Raised for the first unreachable or unhealthy foundation.
        """


class PusherPort(Protocol):
    """Port definition for one foundation's push, rollback, and commit steps."""

    def pusher_login(self, foundation_url: str, deployment_info: DeploymentInfo, response: ResponseStreamPort) -> None:
        """Authenticate against the foundation.

        Raises:
            AuthenticationError: Raised when login fails.
        """

    def pusher_exists(self, app_name: str) -> bool:
        """Return whether the app is already deployed on the foundation."""

    def pusher_has_renamed(self) -> bool:
        """Return whether the live app was renamed aside during this session."""

    def pusher_push(
        self,
        app_path: str,
        app_exists: bool,
        deployment_info: DeploymentInfo,
        response: ResponseStreamPort,
    ) -> None:
        """Rename the live app when present, push new bits, and map the route.

        Raises:
            StateTransitionError: Raised when rename, push, or route mapping fails.
        """

    def pusher_rollback(self, app_existed: bool, deployment_info: DeploymentInfo) -> None:
        """Delete the new app and restore the venerable one.

        Raises:
            StateTransitionError: Raised when a compensating step fails.
        """

    def pusher_delete_venerable(self, deployment_info: DeploymentInfo, foundation_url: str) -> None:
        """Delete the superseded venerable app.

        Raises:
            StateTransitionError: Raised when delete fails.
        """

    def pusher_clean_up(self) -> None:
        """Release resources held by the bound courier.

        Raises:
            OSError: Raised when scratch resources cannot be removed.
        """


class PusherCreatorPort(Protocol):
    """Port definition for building one bound pusher per foundation task."""

    def pusher_creator_create(self, deployment_info: DeploymentInfo, response: ResponseStreamPort) -> PusherPort:
        """Create a pusher bound to a fresh courier and the deployment response.

        Raises:
            RuntimeError: Raised when courier resources cannot be allocated.
        """


class BlueGreenerPort(Protocol):
    """Port definition for fleet-wide blue-green pushes."""

    def bluegreen_push(
        self,
        environment: Environment,
        app_path: str,
        deployment_info: DeploymentInfo,
        response: ResponseStreamPort,
    ) -> BlueGreenResult:
        """Push an app to every foundation, committing or rolling back as a whole.

        Raises:
            DeploymentError: Raised when precheck, push, or commit fails.
        """


class DeploymentServicePort(Protocol):
    """Port definition for running deployment requests from outer surfaces."""

    def deploy_environment_names(self) -> tuple[str, ...]:
        """Return configured environment names."""

    def deploy_resolve_environment(self, environment_name: str) -> Environment:
        """Return the configured environment matching a name.

        Raises:
            EnvironmentNotFoundError: Raised when the environment is not configured.
        """

    def deploy_execute(
        self,
        request: DeploymentRequest,
        response: ResponseStreamPort,
        deployment_uuid: str | None = None,
    ) -> DeploymentOutcome:
        """Run one deployment request, streaming output into the response.

        Returns:
            DeploymentOutcome: Status code and correlation identifier.
        """
