"""Tests for bootstrap wiring and command-line entrypoint behavior."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

import deployer.main as main_module
from deployer.bootstrap import bootstrap_create_deployment_service
from deployer.config import AppSettings
from deployer.jobs import DeploymentOutcome, DeploymentRequest, ResponseStreamPort


def test_bootstrap_create_deployment_service_loads_environments(tmp_path: Path) -> None:
    """Wire a deployment service from settings and the environments file.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate loaded environments and startup log.

    Raises:
        AssertionError: Raised when wiring is wrong.
    """

    config_path = tmp_path / "config.yml"
    config_path.write_text(
        "environments:\n  - name: prod\n    foundations: [https://api.a.example]\n",
        encoding="utf-8",
    )
    log_stream = io.StringIO()
    settings = AppSettings(
        cf_username="deployer",
        cf_password="s3cret",
        environments_config_path=str(config_path),
    )

    service = bootstrap_create_deployment_service(settings=settings, log_stream=log_stream)

    assert service.deploy_environment_names() == ("prod",)
    assert "loaded 1 environment(s)" in log_stream.getvalue()


class _StubDeploymentService:
    """Deployment service test double with a fixed status code."""

    def __init__(self, status_code: int):
        self.requests: list[DeploymentRequest] = []
        self._status_code = status_code

    def deploy_execute(self, request: DeploymentRequest, response: ResponseStreamPort) -> DeploymentOutcome:
        """Record request and return fixed outcome."""

        _ = response
        self.requests.append(request)
        return DeploymentOutcome(status_code=self._status_code, deployment_uuid="uuid-1")


_DEPLOY_ARGUMENTS = [
    "deploy",
    "--environment",
    "prod",
    "--org",
    "acme",
    "--space",
    "payments",
    "--app-name",
    "orders",
    "--artifact-url",
    "https://artifacts.example/orders.zip",
]


def test_main_deploy_command_reads_manifest_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run one deployment with manifest text read from file.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate request mapping.

    Raises:
        AssertionError: Raised when request is built incorrectly.
    """

    manifest_path = tmp_path / "manifest.yml"
    manifest_path.write_text("applications:\n- name: orders\n", encoding="utf-8")
    service = _StubDeploymentService(status_code=200)
    monkeypatch.setattr(main_module, "bootstrap_create_deployment_service", lambda: service)

    main_module.main([*_DEPLOY_ARGUMENTS, "--manifest-file", str(manifest_path)])

    assert service.requests[0].app_name == "orders"
    assert service.requests[0].manifest == "applications:\n- name: orders\n"


def test_main_deploy_command_failure_exits_non_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    """Exit with status 1 when the deployment fails.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate exit status.

    Raises:
        AssertionError: Raised when failure exits cleanly.
    """

    monkeypatch.setattr(main_module, "bootstrap_create_deployment_service", lambda: _StubDeploymentService(500))

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(_DEPLOY_ARGUMENTS)

    assert exit_info.value.code == 1


def test_main_deploy_command_requires_target_options() -> None:
    """Reject deploy invocations missing required options.

    Returns:
        None: Assertions validate argument validation.

    Raises:
        AssertionError: Raised when incomplete invocation is accepted.
    """

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["deploy", "--environment", "prod"])

    assert exit_info.value.code == 2
