"""FastAPI application factory for the deployer service."""

from fastapi import FastAPI

from deployer.jobs import DeploymentServicePort

from .routers import api_create_deploy_router, api_create_health_router


def create_api_application(deployment_service: DeploymentServicePort) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Only the health and deploy routers are mounted.

    Args:
        deployment_service: Deployment service shared by all requests.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when deployment_service is None.
    """

    if deployment_service is None:
        raise ValueError("deployment_service must not be None")

    application = FastAPI(title="Blue-Green Deployer")
    application.include_router(api_create_health_router(deployment_service=deployment_service))
    application.include_router(api_create_deploy_router(deployment_service=deployment_service))

    return application
