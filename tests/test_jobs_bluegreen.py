"""Tests for fleet-wide blue-green orchestration, rollback, and commit behavior."""

from __future__ import annotations

import io
import threading

import pytest

from deployer.adapters import CourierCommandError
from deployer.domain import DEPLOY_FAILURE_EVENT, DEPLOY_SUCCESS_EVENT, DeploymentInfo, Environment, Event
from deployer.events import EventManager
from deployer.jobs import (
    BlueGreenCommitError,
    BlueGreenOrchestrator,
    BlueGreenPushError,
    FoundationUnavailableError,
    PusherCreationError,
    PusherCreator,
)
from deployer.observability import observability_create_logger

_FOUNDATION_A = "https://api.a.example"
_FOUNDATION_B = "https://api.b.example"


class _Fleet:
    """Shared fake platform state for every courier created in one test."""

    def __init__(
        self,
        existing_apps: set[str],
        failures: set[tuple[str, str]] | None = None,
        allocation_failure_at: int | None = None,
        push_barrier: threading.Barrier | None = None,
    ):
        self.existing_apps = existing_apps
        self.failures = failures or set()
        self.allocation_failure_at = allocation_failure_at
        self.push_barrier = push_barrier
        self.calls: list[tuple[str, ...]] = []
        self.clean_ups: list[str] = []
        self.couriers_created = 0
        self._lock = threading.Lock()

    def record(self, foundation_url: str, *call: str) -> None:
        """Record one call under its foundation."""

        with self._lock:
            self.calls.append((foundation_url, *call))

    def calls_for(self, foundation_url: str) -> list[tuple[str, ...]]:
        """Return calls issued against one foundation in order."""

        return [call[1:] for call in self.calls if call[0] == foundation_url]


class _FleetCourier:
    """Courier test double bound to a foundation at login time."""

    def __init__(self, fleet: _Fleet):
        self._fleet = fleet
        self._foundation_url = ""

    def _run(self, *call: str) -> bytes:
        self._fleet.record(self._foundation_url, *call)
        if (self._foundation_url, call[0]) in self._fleet.failures:
            raise CourierCommandError(f"{call[0]} error on {self._foundation_url}")
        return f"[{self._foundation_url}] {call[0]} ok\n".encode("utf-8")

    def courier_login(
        self,
        foundation_url: str,
        username: str,
        password: str,
        org: str,
        space: str,
        skip_ssl: bool,
    ) -> bytes:
        """Bind courier to foundation and record login."""

        _ = (username, password, org, space, skip_ssl)
        self._foundation_url = foundation_url
        return self._run("login")

    def courier_push(self, app_name: str, app_path: str, instances: int) -> bytes:
        """Record push."""

        _ = (app_path, instances)
        if self._fleet.push_barrier is not None:
            self._fleet.push_barrier.wait()
        return self._run("push", app_name)

    def courier_rename(self, app_name: str, new_app_name: str) -> bytes:
        """Record rename."""

        return self._run("rename", app_name, new_app_name)

    def courier_delete(self, app_name: str) -> bytes:
        """Record delete."""

        return self._run("delete", app_name)

    def courier_map_route(self, app_name: str, domain: str) -> bytes:
        """Record route mapping."""

        return self._run("map-route", app_name, domain)

    def courier_logs(self, app_name: str) -> bytes:
        """Record log retrieval."""

        return self._run("logs", app_name)

    def courier_exists(self, app_name: str) -> bool:
        """Report existence from fleet state."""

        self._fleet.record(self._foundation_url, "exists", app_name)
        return self._foundation_url in self._fleet.existing_apps

    def courier_clean_up(self) -> None:
        """Record cleanup."""

        with self._fleet._lock:
            self._fleet.clean_ups.append(self._foundation_url)


class _StaticPrechecker:
    """Prechecker test double returning or raising a fixed result."""

    def __init__(self, error: Exception | None = None):
        self.calls = 0
        self._error = error

    def precheck_assert_all_foundations_up(self, environment: Environment) -> None:
        """Count calls and optionally fail."""

        _ = environment
        self.calls += 1
        if self._error is not None:
            raise self._error


class _CapturingHandler:
    """Test double capturing dispatched events."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def event_on_event(self, event: Event) -> None:
        """Capture dispatched event."""

        self.events.append(event)


def _build_orchestrator(
    fleet: _Fleet,
    prechecker: _StaticPrechecker | None = None,
    max_concurrency: int | None = None,
) -> tuple[BlueGreenOrchestrator, _CapturingHandler]:
    logger = observability_create_logger(io.StringIO(), name="deployer.test.bluegreen")

    def _create_courier() -> _FleetCourier:
        fleet.couriers_created += 1
        if fleet.couriers_created == fleet.allocation_failure_at:
            raise OSError("no space left for CF_HOME")
        return _FleetCourier(fleet)

    event_manager = EventManager()
    captured = _CapturingHandler()
    event_manager.event_add_handler(captured, DEPLOY_SUCCESS_EVENT)
    event_manager.event_add_handler(captured, DEPLOY_FAILURE_EVENT)
    orchestrator = BlueGreenOrchestrator(
        prechecker=prechecker or _StaticPrechecker(),
        pusher_creator=PusherCreator(courier_factory=_create_courier, logger=logger),
        logger=logger,
        event_manager=event_manager,
        max_concurrency=max_concurrency,
    )
    return orchestrator, captured


def _environment() -> Environment:
    return Environment(name="prod", foundations=(_FOUNDATION_A, _FOUNDATION_B), domain="apps.example.com")


def _deployment_info() -> DeploymentInfo:
    return DeploymentInfo(app_name="orders", uuid="uuid-1", domain="apps.example.com", instances=1)


def test_jobs_bluegreen_success_commits_every_foundation() -> None:
    """Push to all foundations and delete venerable apps only where renamed.

    Returns:
        None: Assertions validate per-foundation command sequences and result.

    Raises:
        AssertionError: Raised when commit semantics are violated.
    """

    fleet = _Fleet(existing_apps={_FOUNDATION_A})
    orchestrator, captured = _build_orchestrator(fleet)
    response = io.BytesIO()

    result = orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), response)

    assert fleet.calls_for(_FOUNDATION_A) == [
        ("login",),
        ("exists", "orders"),
        ("rename", "orders", "orders-venerable"),
        ("push", "orders"),
        ("map-route", "orders", "apps.example.com"),
        ("delete", "orders-venerable"),
    ]
    assert fleet.calls_for(_FOUNDATION_B) == [
        ("login",),
        ("exists", "orders"),
        ("push", "orders"),
        ("map-route", "orders", "apps.example.com"),
    ]
    assert sorted(fleet.clean_ups) == [_FOUNDATION_A, _FOUNDATION_B]
    assert [outcome.foundation_url for outcome in result.outcomes] == [_FOUNDATION_A, _FOUNDATION_B]
    assert result.outcomes[0].renamed and not result.outcomes[1].renamed
    assert {entry["stage"] for entry in result.timeline} == {"precheck", "push", "commit", "cleanup"}
    assert f"[{_FOUNDATION_B}] push ok".encode("utf-8") in response.getvalue()
    assert [event.event_type for event in captured.events] == [DEPLOY_SUCCESS_EVENT]


def test_jobs_bluegreen_push_failure_rolls_back_whole_fleet() -> None:
    """Roll back every foundation when one push fails.

    Returns:
        None: Assertions validate compensation and aggregated error.

    Raises:
        AssertionError: Raised when rollback semantics are violated.
    """

    fleet = _Fleet(existing_apps={_FOUNDATION_A, _FOUNDATION_B}, failures={(_FOUNDATION_B, "push")})
    orchestrator, captured = _build_orchestrator(fleet)

    with pytest.raises(BlueGreenPushError) as error_info:
        orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert fleet.calls_for(_FOUNDATION_A)[-2:] == [
        ("delete", "orders"),
        ("rename", "orders-venerable", "orders"),
    ]
    assert fleet.calls_for(_FOUNDATION_B)[-2:] == [
        ("delete", "orders"),
        ("rename", "orders-venerable", "orders"),
    ]
    assert ("delete", "orders-venerable") not in fleet.calls_for(_FOUNDATION_A)
    assert list(error_info.value.failures) == [_FOUNDATION_B]
    assert "push failed on 1 foundation(s)" in str(error_info.value)
    assert sorted(fleet.clean_ups) == [_FOUNDATION_A, _FOUNDATION_B]
    assert captured.events[0].event_type == DEPLOY_FAILURE_EVENT
    assert captured.events[0].data.failed_foundations == (_FOUNDATION_B,)


def test_jobs_bluegreen_rollback_skips_foundation_without_previous_version() -> None:
    """Leave foundations that had no previous version untouched on rollback.

    Returns:
        None: Assertions validate per-foundation rollback decision.

    Raises:
        AssertionError: Raised when a new-app foundation is compensated.
    """

    fleet = _Fleet(existing_apps={_FOUNDATION_A}, failures={(_FOUNDATION_B, "push")})
    orchestrator, _ = _build_orchestrator(fleet)

    with pytest.raises(BlueGreenPushError, match=_FOUNDATION_B):
        orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert fleet.calls_for(_FOUNDATION_A)[-1] == ("rename", "orders-venerable", "orders")
    assert fleet.calls_for(_FOUNDATION_B) == [
        ("login",),
        ("exists", "orders"),
        ("push", "orders"),
        ("logs", "orders"),
    ]


def test_jobs_bluegreen_failed_rename_never_deletes_live_app() -> None:
    """Skip compensation where the rename aside never happened.

    Returns:
        None: Assertions validate the live app is not deleted.

    Raises:
        AssertionError: Raised when the original app is deleted.
    """

    fleet = _Fleet(existing_apps={_FOUNDATION_A, _FOUNDATION_B}, failures={(_FOUNDATION_A, "rename")})
    orchestrator, _ = _build_orchestrator(fleet)

    with pytest.raises(BlueGreenPushError, match="rename failed"):
        orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert ("delete", "orders") not in fleet.calls_for(_FOUNDATION_A)


def test_jobs_bluegreen_commit_failure_raises_commit_error() -> None:
    """Report venerable delete failures as commit errors.

    Returns:
        None: Assertions validate commit failure aggregation.

    Raises:
        AssertionError: Raised when commit failure is swallowed.
    """

    fleet = _Fleet(existing_apps={_FOUNDATION_A}, failures={(_FOUNDATION_A, "delete")})
    orchestrator, captured = _build_orchestrator(fleet)

    with pytest.raises(BlueGreenCommitError, match="commit failed on 1 foundation"):
        orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert captured.events[0].event_type == DEPLOY_FAILURE_EVENT
    assert sorted(fleet.clean_ups) == [_FOUNDATION_A, _FOUNDATION_B]


def test_jobs_bluegreen_precheck_failure_creates_no_pushers() -> None:
    """Abort before any courier is created when precheck fails.

    Returns:
        None: Assertions validate precheck gate.

    Raises:
        AssertionError: Raised when pushes start after failed precheck.
    """

    fleet = _Fleet(existing_apps=set())
    prechecker = _StaticPrechecker(error=FoundationUnavailableError(_FOUNDATION_B, "500 Internal Server Error"))
    orchestrator, _ = _build_orchestrator(fleet, prechecker=prechecker)

    with pytest.raises(FoundationUnavailableError):
        orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert fleet.couriers_created == 0
    assert fleet.calls == []


def test_jobs_bluegreen_single_worker_cap_still_deploys_fleet() -> None:
    """Deploy every foundation when concurrency is capped to one worker.

    Returns:
        None: Assertions validate capped execution.

    Raises:
        AssertionError: Raised when a foundation is skipped.
    """

    fleet = _Fleet(existing_apps=set())
    orchestrator, _ = _build_orchestrator(fleet, max_concurrency=1)

    result = orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert all(outcome.outcome_succeeded() for outcome in result.outcomes)
    assert fleet.couriers_created == 2


def test_jobs_bluegreen_rejects_invalid_concurrency_cap() -> None:
    """Reject concurrency caps below one.

    Returns:
        None: Assertions validate constructor guard.

    Raises:
        AssertionError: Raised when invalid cap is accepted.
    """

    with pytest.raises(ValueError, match="max_concurrency"):
        _build_orchestrator(_Fleet(existing_apps=set()), max_concurrency=0)


def test_jobs_bluegreen_pushes_foundations_concurrently() -> None:
    """Run foundation pushes at the same time rather than one after another.

    Both pushes wait on one barrier, which only opens when they overlap.

    Returns:
        None: Assertions validate concurrent fan-out.

    Raises:
        AssertionError: Raised when pushes run sequentially.
    """

    fleet = _Fleet(existing_apps=set(), push_barrier=threading.Barrier(2, timeout=5))
    orchestrator, captured = _build_orchestrator(fleet)

    result = orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), io.BytesIO())

    assert all(outcome.outcome_succeeded() for outcome in result.outcomes)
    assert not fleet.push_barrier.broken
    assert [event.event_type for event in captured.events] == [DEPLOY_SUCCESS_EVENT]


def test_jobs_bluegreen_pusher_creation_failure_emits_failure_and_cleans_up() -> None:
    """Report a courier allocation failure and release pushers already created.

    Returns:
        None: Assertions validate typed error, failure event and cleanup.

    Raises:
        AssertionError: Raised when allocation failure escapes untyped or silently.
    """

    fleet = _Fleet(existing_apps={_FOUNDATION_A, _FOUNDATION_B}, allocation_failure_at=2)
    orchestrator, captured = _build_orchestrator(fleet)
    response = io.BytesIO()

    with pytest.raises(PusherCreationError, match=_FOUNDATION_B) as error_info:
        orchestrator.bluegreen_push(_environment(), "/tmp/orders", _deployment_info(), response)

    assert error_info.value.foundation_url == _FOUNDATION_B
    assert isinstance(error_info.value.__cause__, OSError)
    assert fleet.calls == []
    assert len(fleet.clean_ups) == 1
    assert [event.event_type for event in captured.events] == [DEPLOY_FAILURE_EVENT]
    assert captured.events[0].data.failed_foundations == (_FOUNDATION_B,)
    assert b"no space left for CF_HOME" in response.getvalue()
