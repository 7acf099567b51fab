"""Deploy API router running one blue-green deployment per request."""

from __future__ import annotations

import threading
import uuid
from typing import Iterator

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, Field

from deployer.jobs import (
    DeploymentRequest,
    DeploymentServicePort,
    EnvironmentNotFoundError,
    QueuedResponseStream,
)

_basic_security = HTTPBasic(auto_error=False)


class DeployRequestBody(BaseModel):
    """JSON body accepted by the deploy endpoint.

    Attributes:
        artifact_url: Zip artifact URL.
        manifest: Optional manifest text written beside the extracted bits.
        health_check_endpoint: Optional health-check path.
        environment_variables: Application environment variables.
        data: Caller metadata carried through untouched.
    """

    artifact_url: str = Field(min_length=1)
    manifest: str = Field(default="")
    health_check_endpoint: str = Field(default="")
    environment_variables: dict[str, str] = Field(default_factory=dict)
    data: dict[str, object] = Field(default_factory=dict)


def api_stream_deployment(
    deployment_service: DeploymentServicePort,
    request: DeploymentRequest,
    deployment_uuid: str,
) -> Iterator[bytes]:
    """Run one deployment on a worker thread and yield its output as it is written.

    Args:
        deployment_service: Deployment service running the request.
        request: Deployment request.
        deployment_uuid: Correlation identifier announced to the caller.

    Returns:
        Iterator[bytes]: Output chunks in write order, ending after the outcome line.

    Raises:
        RuntimeError: Deployment failures are reported in the streamed output.
    """

    stream = QueuedResponseStream()

    def _run() -> None:
        try:
            deployment_service.deploy_execute(request, stream, deployment_uuid=deployment_uuid)
        finally:
            stream.stream_close()

    worker = threading.Thread(target=_run, name=f"deploy-{deployment_uuid}", daemon=True)
    worker.start()
    yield from stream.stream_iter_chunks()
    worker.join()


def api_create_deploy_router(deployment_service: DeploymentServicePort) -> APIRouter:
    """Create deploy router.

    Args:
        deployment_service: Deployment service running requests.

    Returns:
        APIRouter: Router exposing the deploy endpoint.

    Raises:
        ValueError: Raised when deployment_service is invalid.
    """

    if deployment_service is None:
        raise ValueError("deployment_service must not be None")

    router = APIRouter(prefix="/v1/apps", tags=["deploy"])

    @router.post("/{environment}/{org}/{space}/{app_name}")
    def api_deploy_app(
        environment: str,
        org: str,
        space: str,
        app_name: str,
        body: DeployRequestBody,
        credentials: HTTPBasicCredentials | None = Depends(_basic_security),
    ) -> Response:
        """Deploy an artifact to every foundation of the environment.

        Basic auth credentials, when present, override the configured ones.
        Output is streamed while the deployment runs; its last line reports
        the outcome.

        Returns:
            Response: 400 for an unknown environment, otherwise a streamed 200.
        """

        request = DeploymentRequest(
            environment=environment,
            org=org,
            space=space,
            app_name=app_name,
            artifact_url=body.artifact_url,
            manifest=body.manifest,
            username="" if credentials is None else credentials.username,
            password="" if credentials is None else credentials.password,
            environment_variables=body.environment_variables,
            health_check_endpoint=body.health_check_endpoint,
            data=body.data,
        )
        try:
            deployment_service.deploy_resolve_environment(environment)
        except EnvironmentNotFoundError as error:
            return PlainTextResponse(content=f"{error}\n", status_code=status.HTTP_400_BAD_REQUEST)

        deployment_uuid = str(uuid.uuid4())
        return StreamingResponse(
            api_stream_deployment(deployment_service, request, deployment_uuid),
            status_code=status.HTTP_200_OK,
            media_type="text/plain; charset=utf-8",
            headers={"X-Deployment-Id": deployment_uuid},
        )

    return router
