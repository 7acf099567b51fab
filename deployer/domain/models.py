"""Typed domain models shared across deployer layer boundaries.

This module provides immutable data contracts passed between configuration,
orchestration, adapter, and event layers during a blue-green deployment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Mapping, Union

FOUNDATIONS_UNAVAILABLE_EVENT: Final[str] = "validate.foundationsUnavailable"
DEPLOY_SUCCESS_EVENT: Final[str] = "deploy.success"
DEPLOY_FAILURE_EVENT: Final[str] = "deploy.failure"

_VENERABLE_SUFFIX: Final[str] = "-venerable"


@dataclass(frozen=True)
class Environment:
    """Named group of foundations sharing domain and deployment policy.

    Attributes:
        name: Environment name as configured.
        foundations: Ordered foundation API base URLs.
        domain: Route domain applied to pushed applications.
        skip_ssl: Whether TLS certificate verification is skipped.
        instances: Default instance count, already normalized to be >= 1.
    """

    name: str
    foundations: tuple[str, ...]
    domain: str = ""
    skip_ssl: bool = False
    instances: int = 1


@dataclass(frozen=True)
class DeploymentInfo:
    """Immutable per-deployment record handed to every foundation task.

    Attributes:
        artifact_url: Source URL of the deployed artifact.
        manifest: Optional manifest text supplied by the caller.
        username: Platform username.
        password: Platform password.
        environment: Target environment name.
        org: Platform organization.
        space: Platform space.
        app_name: Application name.
        uuid: Deployment correlation identifier.
        skip_ssl: Whether TLS certificate verification is skipped.
        instances: Instance count used for the push.
        domain: Route domain.
        app_path: Local path of the extracted artifact bits.
        environment_variables: Application environment variables.
        health_check_endpoint: Optional health-check path.
        data: Caller metadata carried through untouched.
    """

    artifact_url: str = ""
    manifest: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    environment: str = ""
    org: str = ""
    space: str = ""
    app_name: str = ""
    uuid: str = ""
    skip_ssl: bool = False
    instances: int = 1
    domain: str = ""
    app_path: str = ""
    environment_variables: Mapping[str, str] = field(default_factory=dict)
    health_check_endpoint: str = ""
    data: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Shared by concurrent foundation tasks; mappings are exposed read-only.
        object.__setattr__(self, "environment_variables", MappingProxyType(dict(self.environment_variables)))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))


@dataclass(frozen=True)
class PrecheckerEventData:
    """Payload for foundation availability events.

    Attributes:
        environment: Environment being checked.
        description: Human-readable failure description.
    """

    environment: Environment
    description: str


@dataclass(frozen=True)
class DeploymentEventData:
    """Payload for deployment outcome events.

    Attributes:
        deployment_info: Deployment that finished.
        environment_name: Target environment name.
        description: Human-readable outcome description.
        failed_foundations: Foundations that failed, empty on success.
    """

    deployment_info: DeploymentInfo
    environment_name: str
    description: str
    failed_foundations: tuple[str, ...] = ()


EventData = Union[PrecheckerEventData, DeploymentEventData]


@dataclass(frozen=True)
class Event:
    """Typed event dispatched through the event manager.

    Attributes:
        event_type: Event type key handlers register under.
        data: Typed event payload.
    """

    event_type: str
    data: EventData


@dataclass(frozen=True)
class FoundationPushOutcome:
    """Push-phase result captured inside one foundation task.

    Attributes:
        foundation_url: Foundation the task ran against.
        app_existed: Whether the app already existed before the push.
        renamed: Whether the live app was renamed to its venerable name.
        error: Failure raised by the task, None on success.
    """

    foundation_url: str
    app_existed: bool = False
    renamed: bool = False
    error: Exception | None = None

    def outcome_succeeded(self) -> bool:
        """Return whether the foundation task completed without failure."""

        return self.error is None


@dataclass(frozen=True)
class BlueGreenResult:
    """Success contract for one fleet-wide blue-green push.

    Attributes:
        environment_name: Target environment name.
        app_name: Deployed application name.
        outcomes: Per-foundation push outcomes in foundation order.
        timeline: Structured stage timeline entries.
    """

    environment_name: str
    app_name: str
    outcomes: tuple[FoundationPushOutcome, ...]
    timeline: list[dict[str, object]]


def domain_venerable_name(app_name: str) -> str:
    """Return the venerable name an existing app is parked under during rollover.

    Args:
        app_name: Live application name.

    Returns:
        str: Venerable application name.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return f"{app_name}{_VENERABLE_SUFFIX}"


def domain_normalize_instances(instances: int) -> int:
    """Normalize a configured instance count.

    Args:
        instances: Configured instance count.

    Returns:
        int: One when configured as zero, otherwise the value unchanged.

    Raises:
        ValueError: Raised when instance count is negative.
    """

    if instances < 0:
        raise ValueError("instances must be >= 0")
    if instances == 0:
        return 1
    return instances
