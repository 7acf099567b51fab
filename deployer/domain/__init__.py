"""Domain models used across deployer layer boundaries."""

from .models import (
	DEPLOY_FAILURE_EVENT,
	DEPLOY_SUCCESS_EVENT,
	FOUNDATIONS_UNAVAILABLE_EVENT,
	BlueGreenResult,
	DeploymentEventData,
	DeploymentInfo,
	Environment,
	Event,
	EventData,
	FoundationPushOutcome,
	PrecheckerEventData,
	domain_normalize_instances,
	domain_venerable_name,
)
from .timeline import domain_build_stage_event

__all__ = [
	"DEPLOY_FAILURE_EVENT",
	"DEPLOY_SUCCESS_EVENT",
	"FOUNDATIONS_UNAVAILABLE_EVENT",
	"BlueGreenResult",
	"DeploymentEventData",
	"DeploymentInfo",
	"Environment",
	"Event",
	"EventData",
	"FoundationPushOutcome",
	"PrecheckerEventData",
	"domain_build_stage_event",
	"domain_normalize_instances",
	"domain_venerable_name",
]
