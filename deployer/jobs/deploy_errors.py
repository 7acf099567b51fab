"""Project-native typed exceptions for blue-green deployment failures."""

from __future__ import annotations


class DeploymentError(Exception):
    """Base exception for deployment orchestration failures."""


class ConfigurationError(DeploymentError, ValueError):
    """Environment configuration does not allow a deployment to start."""


class NoFoundationsConfiguredError(ConfigurationError):
    """Environment has no foundations to deploy to."""

    def __init__(self, environment_name: str = ""):
        super().__init__("no foundations configured")
        self.environment_name = environment_name


class AvailabilityError(DeploymentError):
    """Foundation availability precheck failure.

    Attributes:
        foundation_url: Foundation that failed the precheck.
    """

    def __init__(self, message: str, foundation_url: str):
        super().__init__(message)
        self.foundation_url = foundation_url


class InvalidRequestError(AvailabilityError):
    """Transport-level failure while probing a foundation."""

    def __init__(self, foundation_url: str, cause: Exception):
        super().__init__(f"cannot reach foundation {foundation_url}: {cause}", foundation_url=foundation_url)
        self.cause = cause


class FoundationUnavailableError(AvailabilityError):
    """Foundation answered the info request with a non-200 status."""

    def __init__(self, foundation_url: str, status_text: str):
        super().__init__(f"deploy aborted, {foundation_url} is unavailable: {status_text}", foundation_url=foundation_url)
        self.status_text = status_text


class AuthenticationError(DeploymentError):
    """Login to a foundation failed.

    Attributes:
        foundation_url: Foundation the login was attempted against.
    """

    def __init__(self, foundation_url: str, cause: Exception):
        super().__init__(f"cannot login to {foundation_url}: {cause}")
        self.foundation_url = foundation_url


class LogRetrievalError(DeploymentError):
    """Secondary failure while fetching platform logs after a primary failure."""

    def __init__(self, cause: Exception):
        super().__init__(f"cannot get logs: {cause}")


class PusherCreationError(DeploymentError, RuntimeError):
    """Resources for a foundation push session could not be allocated.

    Attributes:
        foundation_url: Foundation the pusher was being created for.
    """

    def __init__(self, foundation_url: str, cause: Exception):
        super().__init__(f"cannot prepare push to {foundation_url}: {cause}")
        self.foundation_url = foundation_url


class StateTransitionError(DeploymentError, RuntimeError):
    """Rename, push, route-map, or delete step failed on a foundation.

    Attributes:
        log_error: Log retrieval failure chained after the primary failure, if any.
    """

    def __init__(self, message: str, log_error: LogRetrievalError | None = None):
        if log_error is not None:
            message = f"{message}: {log_error}"
        super().__init__(message)
        self.log_error = log_error


class BlueGreenDeploymentError(DeploymentError):
    """Fleet-wide deployment failure aggregated across foundations.

    Attributes:
        failures: Failure text keyed by foundation URL.
        rollback_failures: Compensation failure text keyed by foundation URL.
    """

    _PHASE_LABEL = "deployment"

    def __init__(
        self,
        failures: dict[str, str],
        rollback_failures: dict[str, str] | None = None,
    ):
        self.failures = dict(failures)
        self.rollback_failures = dict(rollback_failures or {})
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [f"{self._PHASE_LABEL} failed on {len(self.failures)} foundation(s):"]
        lines.extend(f"  {foundation_url}: {reason}" for foundation_url, reason in self.failures.items())
        if self.rollback_failures:
            lines.append(f"rollback failed on {len(self.rollback_failures)} foundation(s):")
            lines.extend(
                f"  {foundation_url}: {reason}" for foundation_url, reason in self.rollback_failures.items()
            )
        return "\n".join(lines)


class BlueGreenPushError(BlueGreenDeploymentError):
    """At least one foundation failed its push; the fleet was rolled back."""

    _PHASE_LABEL = "push"


class BlueGreenCommitError(BlueGreenDeploymentError):
    """Every push succeeded but deleting a venerable app failed."""

    _PHASE_LABEL = "commit"


class EnvironmentNotFoundError(ConfigurationError):
    """Requested environment is not configured."""

    def __init__(self, environment_name: str):
        super().__init__(f"environment not found: {environment_name}")
        self.environment_name = environment_name
