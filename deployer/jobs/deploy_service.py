"""Deployment service turning a deploy request into one orchestrated blue-green push."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Mapping

from deployer.adapters import ArtifactFetchError, ArtifactFetcherPort
from deployer.domain import DeploymentInfo, Environment

from .deploy_errors import DeploymentError, EnvironmentNotFoundError
from .interfaces import BlueGreenerPort, ResponseStreamPort
from .response_stream import job_wrap_response


@dataclass(frozen=True)
class DeploymentCredentials:
    """Default platform credentials used when a request supplies none.

    Attributes:
        username: Platform username.
        password: Platform password.
    """

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class DeploymentRequest:
    """Caller-supplied deployment request.

    Attributes:
        environment: Target environment name.
        org: Platform organization.
        space: Platform space.
        app_name: Application name.
        artifact_url: Zip artifact URL.
        manifest: Optional manifest text.
        username: Optional username overriding configured credentials.
        password: Optional password overriding configured credentials.
        environment_variables: Application environment variables.
        health_check_endpoint: Optional health-check path.
        data: Caller metadata carried through untouched.
    """

    environment: str
    org: str
    space: str
    app_name: str
    artifact_url: str
    manifest: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    environment_variables: Mapping[str, str] = field(default_factory=dict)
    health_check_endpoint: str = ""
    data: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class DeploymentOutcome:
    """Result contract for one deployment request.

    Attributes:
        status_code: HTTP-style status code for the outcome.
        deployment_uuid: Correlation identifier of the deployment.
        error_message: Failure text, None on success.
    """

    status_code: int
    deployment_uuid: str
    error_message: str | None = None

    def outcome_succeeded(self) -> bool:
        """Return whether the deployment succeeded."""

        return self.status_code == HTTPStatus.OK


class DeploymentService:
    """Resolve environment, fetch the artifact, and run the blue-green push."""

    def __init__(
        self,
        environments: Mapping[str, Environment],
        bluegreen: BlueGreenerPort,
        artifact_fetcher: ArtifactFetcherPort,
        credentials: DeploymentCredentials,
        logger: logging.Logger,
    ):
        """Initialize deployment service dependencies.

        Args:
            environments: Configured environments keyed by lower-cased name.
            bluegreen: Fleet-wide blue-green orchestrator.
            artifact_fetcher: Artifact download and extraction adapter.
            credentials: Default platform credentials.
            logger: Logger handle.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are None.
        """

        if environments is None:
            raise ValueError("environments must not be None")
        if bluegreen is None:
            raise ValueError("bluegreen must not be None")
        if artifact_fetcher is None:
            raise ValueError("artifact_fetcher must not be None")
        if credentials is None:
            raise ValueError("credentials must not be None")
        if logger is None:
            raise ValueError("logger must not be None")

        self._environments = dict(environments)
        self._bluegreen = bluegreen
        self._artifact_fetcher = artifact_fetcher
        self._credentials = credentials
        self._logger = logger

    def deploy_environment_names(self) -> tuple[str, ...]:
        """Return configured environment names in deterministic order."""

        return tuple(sorted(environment.name for environment in self._environments.values()))

    def deploy_execute(
        self,
        request: DeploymentRequest,
        response: ResponseStreamPort,
        deployment_uuid: str | None = None,
    ) -> DeploymentOutcome:
        """Run one deployment request end to end.

        The artifact directory is removed on every exit path. The outcome
        message is also written to the response.

        Args:
            request: Deployment request.
            response: Response stream receiving live deployment output.
            deployment_uuid: Optional correlation identifier issued by the caller.

        Returns:
            DeploymentOutcome: 200 on success, 400 for request errors, 500 for deployment errors.

        Raises:
            RuntimeError: Deployment failures are reported through the outcome.
        """

        writer = job_wrap_response(response)
        deployment_uuid = deployment_uuid or str(uuid.uuid4())

        try:
            environment = self.deploy_resolve_environment(request.environment)
        except EnvironmentNotFoundError as error:
            return self._deploy_finish(writer, deployment_uuid, HTTPStatus.BAD_REQUEST, error)

        self._logger.info(
            "deployment %s: %s to %s/%s/%s",
            deployment_uuid,
            request.app_name,
            environment.name,
            request.org,
            request.space,
        )

        try:
            app_path = self._artifact_fetcher.artifact_fetch(request.artifact_url, request.manifest)
        except (ArtifactFetchError, ValueError) as error:
            return self._deploy_finish(writer, deployment_uuid, HTTPStatus.BAD_REQUEST, error)

        try:
            deployment_info = self.deploy_build_info(
                request=request,
                environment=environment,
                deployment_uuid=deployment_uuid,
                app_path=app_path,
            )
            self._bluegreen.bluegreen_push(environment, app_path, deployment_info, writer)
        except DeploymentError as error:
            return self._deploy_finish(writer, deployment_uuid, HTTPStatus.INTERNAL_SERVER_ERROR, error)
        finally:
            try:
                self._artifact_fetcher.artifact_clean_up(app_path)
            except OSError as error:
                self._logger.error("cannot remove artifact directory %s: %s", app_path, error)

        return self._deploy_finish(writer, deployment_uuid, HTTPStatus.OK, None)

    def deploy_resolve_environment(self, environment_name: str) -> Environment:
        """Return the configured environment matching a name case-insensitively.

        Raises:
            EnvironmentNotFoundError: Raised when the environment is not configured.
        """

        environment = self._environments.get(environment_name.strip().lower())
        if environment is None:
            raise EnvironmentNotFoundError(environment_name)
        return environment

    def deploy_build_info(
        self,
        request: DeploymentRequest,
        environment: Environment,
        deployment_uuid: str,
        app_path: str,
    ) -> DeploymentInfo:
        """Build the immutable deployment record shared by every foundation task."""

        return DeploymentInfo(
            artifact_url=request.artifact_url,
            manifest=request.manifest,
            username=request.username or self._credentials.username,
            password=request.password or self._credentials.password,
            environment=environment.name,
            org=request.org,
            space=request.space,
            app_name=request.app_name,
            uuid=deployment_uuid,
            skip_ssl=environment.skip_ssl,
            instances=environment.instances,
            domain=environment.domain,
            app_path=app_path,
            environment_variables=dict(request.environment_variables),
            health_check_endpoint=request.health_check_endpoint,
            data=dict(request.data),
        )

    def _deploy_finish(
        self,
        writer: ResponseStreamPort,
        deployment_uuid: str,
        status_code: HTTPStatus,
        error: Exception | None,
    ) -> DeploymentOutcome:
        """Write the closing message to the response and build the outcome."""

        if error is None:
            writer.write(f"deployment {deployment_uuid} succeeded\n".encode("utf-8"))
            return DeploymentOutcome(status_code=int(status_code), deployment_uuid=deployment_uuid)

        self._logger.error("deployment %s failed: %s", deployment_uuid, error)
        writer.write(f"deployment {deployment_uuid} failed: {error}\n".encode("utf-8"))
        return DeploymentOutcome(
            status_code=int(status_code),
            deployment_uuid=deployment_uuid,
            error_message=str(error),
        )
