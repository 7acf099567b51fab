"""Adapter layer package for platform and artifact integration boundaries."""

from .artifact_fetcher import ArtifactFetcher
from .cloudfoundry_courier import CloudFoundryCourier
from .courier_errors import (
	ArtifactExtractionError,
	ArtifactFetchError,
	CourierCommandError,
	CourierError,
	CourierTimeoutError,
)
from .interfaces import ArtifactFetcherPort, CourierPort

__all__ = [
	"ArtifactExtractionError",
	"ArtifactFetchError",
	"ArtifactFetcher",
	"ArtifactFetcherPort",
	"CloudFoundryCourier",
	"CourierCommandError",
	"CourierError",
	"CourierPort",
	"CourierTimeoutError",
]
