"""Main module entrypoint for the deployer service and one-shot deploys."""

import argparse
import sys

import uvicorn

from deployer.bootstrap import bootstrap_create_application, bootstrap_create_deployment_service
from deployer.config import config_load_settings
from deployer.jobs import DeploymentRequest


def main(argv: list[str] | None = None) -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when a one-shot deploy fails.
    """

    argument_parser = argparse.ArgumentParser(description="Blue-green deployer runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "deploy"),
        help="Runtime command: `api` starts server, `deploy` runs one deployment and streams its output",
        type=str,
    )
    argument_parser.add_argument("--environment", dest="environment", type=str, help="Target environment for `deploy`")
    argument_parser.add_argument("--org", dest="org", type=str, help="Platform organization for `deploy`")
    argument_parser.add_argument("--space", dest="space", type=str, help="Platform space for `deploy`")
    argument_parser.add_argument("--app-name", dest="app_name", type=str, help="Application name for `deploy`")
    argument_parser.add_argument("--artifact-url", dest="artifact_url", type=str, help="Zip artifact URL for `deploy`")
    argument_parser.add_argument(
        "--manifest-file",
        dest="manifest_file",
        type=str,
        help="Optional manifest file written beside the artifact for `deploy`",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    if parsed_arguments.command == "deploy":
        missing = [
            option
            for option, value in (
                ("--environment", parsed_arguments.environment),
                ("--org", parsed_arguments.org),
                ("--space", parsed_arguments.space),
                ("--app-name", parsed_arguments.app_name),
                ("--artifact-url", parsed_arguments.artifact_url),
            )
            if not value
        ]
        if missing:
            argument_parser.error(f"`deploy` requires {', '.join(missing)}")

        manifest = ""
        if parsed_arguments.manifest_file:
            with open(parsed_arguments.manifest_file, "r", encoding="utf-8") as manifest_file:
                manifest = manifest_file.read()

        deployment_service = bootstrap_create_deployment_service()
        outcome = deployment_service.deploy_execute(
            DeploymentRequest(
                environment=parsed_arguments.environment,
                org=parsed_arguments.org,
                space=parsed_arguments.space,
                app_name=parsed_arguments.app_name,
                artifact_url=parsed_arguments.artifact_url,
                manifest=manifest,
            ),
            sys.stdout.buffer,
        )
        if not outcome.outcome_succeeded():
            raise SystemExit(1)
        return

    settings = config_load_settings()
    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
