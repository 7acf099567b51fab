"""Job layer package for deployment orchestration boundaries."""

from .bluegreen import BlueGreenOrchestrator
from .deploy_errors import (
	AuthenticationError,
	AvailabilityError,
	BlueGreenCommitError,
	BlueGreenDeploymentError,
	BlueGreenPushError,
	ConfigurationError,
	DeploymentError,
	EnvironmentNotFoundError,
	FoundationUnavailableError,
	InvalidRequestError,
	LogRetrievalError,
	NoFoundationsConfiguredError,
	PusherCreationError,
	StateTransitionError,
)
from .deploy_service import DeploymentCredentials, DeploymentOutcome, DeploymentRequest, DeploymentService
from .interfaces import (
	BlueGreenerPort,
	DeploymentServicePort,
	PrecheckerPort,
	PusherCreatorPort,
	PusherPort,
	ResponseStreamPort,
)
from .prechecker import DEFAULT_PRECHECK_TIMEOUT_SECONDS, FoundationPrechecker
from .pusher import FoundationPusher, PusherState
from .pusher_creator import PusherCreator
from .response_stream import QueuedResponseStream, SynchronizedResponseWriter, job_wrap_response

__all__ = [
	"AuthenticationError",
	"AvailabilityError",
	"BlueGreenCommitError",
	"BlueGreenDeploymentError",
	"BlueGreenOrchestrator",
	"BlueGreenPushError",
	"BlueGreenerPort",
	"ConfigurationError",
	"DEFAULT_PRECHECK_TIMEOUT_SECONDS",
	"DeploymentCredentials",
	"DeploymentError",
	"DeploymentOutcome",
	"DeploymentRequest",
	"DeploymentServicePort",
	"DeploymentService",
	"EnvironmentNotFoundError",
	"FoundationPrechecker",
	"FoundationPusher",
	"FoundationUnavailableError",
	"InvalidRequestError",
	"LogRetrievalError",
	"NoFoundationsConfiguredError",
	"PrecheckerPort",
	"PusherCreationError",
	"PusherCreator",
	"PusherCreatorPort",
	"PusherPort",
	"PusherState",
	"QueuedResponseStream",
	"ResponseStreamPort",
	"StateTransitionError",
	"SynchronizedResponseWriter",
	"job_wrap_response",
]
