"""API router package for endpoint composition."""

from .deploy import DeployRequestBody, api_create_deploy_router, api_stream_deployment
from .health import api_create_health_router

__all__ = ["DeployRequestBody", "api_create_deploy_router", "api_create_health_router", "api_stream_deployment"]
