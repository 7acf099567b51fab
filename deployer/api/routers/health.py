"""Health endpoint router reporting configured environments."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from deployer.jobs import DeploymentServicePort


def api_create_health_router(deployment_service: DeploymentServicePort) -> APIRouter:
    """Create health-check router.

    Args:
        deployment_service: Deployment service exposing configured environments.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when deployment_service is invalid.
    """

    if deployment_service is None:
        raise ValueError("deployment_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return liveness state and configured environment names."""

        payload = {
            "status": "ok",
            "environments": list(deployment_service.deploy_environment_names()),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
