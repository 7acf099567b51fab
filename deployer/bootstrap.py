"""Application bootstrap wiring for startup validation and dependency assembly."""

import sys
from typing import TextIO

from fastapi import FastAPI

from deployer.adapters import ArtifactFetcher, CloudFoundryCourier
from deployer.api import create_api_application
from deployer.config import AppSettings, config_load_environments, config_load_settings
from deployer.domain import DEPLOY_FAILURE_EVENT, DEPLOY_SUCCESS_EVENT, FOUNDATIONS_UNAVAILABLE_EVENT
from deployer.events import EventManager, LoggingEventHandler
from deployer.jobs import (
    BlueGreenOrchestrator,
    DeploymentCredentials,
    DeploymentService,
    FoundationPrechecker,
    PusherCreator,
)
from deployer.observability import observability_create_logger


def bootstrap_create_deployment_service(
    settings: AppSettings | None = None,
    log_stream: TextIO | None = None,
) -> DeploymentService:
    """Assemble the deployment service from validated settings.

    Args:
        settings: Optional preloaded settings, loaded from environment when None.
        log_stream: Optional log destination, stderr when None.

    Returns:
        DeploymentService: Fully wired deployment service.

    Raises:
        SettingsLoadError: Raised when settings or environments configuration is invalid.
    """

    resolved_settings = settings or config_load_settings()
    logger = observability_create_logger(stream=log_stream or sys.stderr, level=resolved_settings.log_level)
    environments = config_load_environments(resolved_settings.environments_config_path)

    event_manager = EventManager()
    event_handler = LoggingEventHandler(logger=logger)
    for event_type in (FOUNDATIONS_UNAVAILABLE_EVENT, DEPLOY_SUCCESS_EVENT, DEPLOY_FAILURE_EVENT):
        event_manager.event_add_handler(event_handler, event_type)

    prechecker = FoundationPrechecker(
        event_manager=event_manager,
        logger=logger,
        timeout_seconds=resolved_settings.precheck_timeout_seconds,
    )
    pusher_creator = PusherCreator(
        courier_factory=lambda: CloudFoundryCourier(
            cf_binary=resolved_settings.cf_binary,
            command_timeout_seconds=resolved_settings.cf_command_timeout_seconds,
        ),
        logger=logger,
    )
    bluegreen = BlueGreenOrchestrator(
        prechecker=prechecker,
        pusher_creator=pusher_creator,
        logger=logger,
        event_manager=event_manager,
        max_concurrency=resolved_settings.max_foundation_concurrency,
    )
    logger.info("loaded %d environment(s) from %s", len(environments), resolved_settings.environments_config_path)
    return DeploymentService(
        environments=environments,
        bluegreen=bluegreen,
        artifact_fetcher=ArtifactFetcher(request_timeout_seconds=resolved_settings.artifact_timeout_seconds),
        credentials=DeploymentCredentials(
            username=resolved_settings.cf_username,
            password=resolved_settings.cf_password,
        ),
        logger=logger,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return create_api_application(
        deployment_service=bootstrap_create_deployment_service(settings=resolved_settings),
    )
