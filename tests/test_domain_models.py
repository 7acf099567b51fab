"""Tests for deployer domain contracts and pure helpers."""

from __future__ import annotations

import dataclasses

import pytest

from deployer.domain import (
    DeploymentInfo,
    Environment,
    FoundationPushOutcome,
    domain_build_stage_event,
    domain_normalize_instances,
    domain_venerable_name,
)


def test_domain_normalize_instances_maps_zero_to_one_and_is_idempotent() -> None:
    """Normalize zero instances to one and keep positive counts unchanged.

    Returns:
        None: Assertions validate normalization behavior.

    Raises:
        AssertionError: Raised when normalization is incorrect.
    """

    assert domain_normalize_instances(0) == 1
    assert domain_normalize_instances(3) == 3
    assert domain_normalize_instances(domain_normalize_instances(0)) == 1


def test_domain_normalize_instances_rejects_negative_count() -> None:
    """Reject negative instance counts.

    Returns:
        None: Assertions validate rejection.

    Raises:
        AssertionError: Raised when negative counts are accepted.
    """

    with pytest.raises(ValueError, match="instances"):
        domain_normalize_instances(-1)


def test_domain_venerable_name_appends_suffix() -> None:
    """Derive the venerable name from the live app name.

    Returns:
        None: Assertions validate derived name.

    Raises:
        AssertionError: Raised when suffix is wrong.
    """

    assert domain_venerable_name("orders") == "orders-venerable"


def test_domain_deployment_info_is_immutable_and_hides_password() -> None:
    """Keep deployment records frozen and exclude password from repr.

    Returns:
        None: Assertions validate immutability and redaction.

    Raises:
        AssertionError: Raised when record can be mutated or leaks password.
    """

    environment_variables = {"MODE": "blue"}
    deployment_info = DeploymentInfo(
        app_name="orders",
        username="deployer",
        password="s3cret",
        environment_variables=environment_variables,
        data={"ticket": "CHG-1"},
    )

    with pytest.raises(dataclasses.FrozenInstanceError):
        deployment_info.app_name = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        deployment_info.environment_variables["MODE"] = "green"  # type: ignore[index]
    with pytest.raises(TypeError):
        deployment_info.data["ticket"] = "CHG-2"  # type: ignore[index]
    environment_variables["MODE"] = "green"
    assert deployment_info.environment_variables == {"MODE": "blue"}
    assert deployment_info.data == {"ticket": "CHG-1"}
    assert "s3cret" not in repr(deployment_info)


def test_domain_environment_keeps_foundation_order() -> None:
    """Preserve configured foundation order.

    Returns:
        None: Assertions validate ordering.

    Raises:
        AssertionError: Raised when ordering changes.
    """

    environment = Environment(name="prod", foundations=("https://b.example", "https://a.example"))

    assert environment.foundations == ("https://b.example", "https://a.example")
    assert environment.instances == 1


def test_domain_push_outcome_success_depends_on_error() -> None:
    """Report task success only when no error was captured.

    Returns:
        None: Assertions validate outcome status.

    Raises:
        AssertionError: Raised when status is inverted.
    """

    assert FoundationPushOutcome(foundation_url="https://a.example").outcome_succeeded()
    assert not FoundationPushOutcome(
        foundation_url="https://a.example",
        error=RuntimeError("boom"),
    ).outcome_succeeded()


def test_domain_build_stage_event_scopes_entry_to_foundation() -> None:
    """Include foundation and details only when provided.

    Returns:
        None: Assertions validate timeline entry shape.

    Raises:
        AssertionError: Raised when entry shape is wrong.
    """

    fleet_entry = domain_build_stage_event(stage="precheck", status="started")
    foundation_entry = domain_build_stage_event(
        stage="push",
        status="failed",
        foundation_url="https://a.example",
        details={"error_message": "boom"},
    )

    assert set(fleet_entry) == {"stage", "status", "at_utc"}
    assert foundation_entry["foundation_url"] == "https://a.example"
    assert foundation_entry["details"] == {"error_message": "boom"}
