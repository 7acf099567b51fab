"""Fleet-wide blue-green orchestrator with all-or-nothing commit semantics."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from deployer.domain import (
    DEPLOY_FAILURE_EVENT,
    DEPLOY_SUCCESS_EVENT,
    BlueGreenResult,
    DeploymentEventData,
    DeploymentInfo,
    Environment,
    Event,
    FoundationPushOutcome,
    domain_build_stage_event,
)
from deployer.events import EventDispatchError, EventManagerPort

from .deploy_errors import BlueGreenCommitError, BlueGreenPushError, PusherCreationError
from .interfaces import BlueGreenerPort, PrecheckerPort, PusherCreatorPort, PusherPort, ResponseStreamPort
from .response_stream import SynchronizedResponseWriter, job_wrap_response

_FoundationAction = Callable[[str, PusherPort], None]


class BlueGreenOrchestrator(BlueGreenerPort):
    """Push one app to every foundation of an environment as a single unit.

    Foundations run concurrently, one task each. After every task finished the
    fleet is either committed (venerable apps deleted) or compensated (new apps
    deleted, venerable apps renamed back). Each pusher is cleaned up exactly once.
    """

    def __init__(
        self,
        prechecker: PrecheckerPort,
        pusher_creator: PusherCreatorPort,
        logger: logging.Logger,
        event_manager: EventManagerPort | None = None,
        max_concurrency: int | None = None,
    ):
        """Initialize orchestrator dependencies.

        Args:
            prechecker: Availability precheck run before any push.
            pusher_creator: Factory creating one pusher per foundation.
            logger: Logger handle.
            event_manager: Optional event manager notified of deployment outcomes.
            max_concurrency: Optional cap on concurrent foundation tasks.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if prechecker is None:
            raise ValueError("prechecker must not be None")
        if pusher_creator is None:
            raise ValueError("pusher_creator must not be None")
        if logger is None:
            raise ValueError("logger must not be None")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")

        self._prechecker = prechecker
        self._pusher_creator = pusher_creator
        self._logger = logger
        self._event_manager = event_manager
        self._max_concurrency = max_concurrency

    def bluegreen_push(
        self,
        environment: Environment,
        app_path: str,
        deployment_info: DeploymentInfo,
        response: ResponseStreamPort,
    ) -> BlueGreenResult:
        """Run precheck, push to every foundation, then commit or roll back.

        Args:
            environment: Target environment.
            app_path: Directory holding extracted application bits.
            deployment_info: Deployment record shared by every foundation task.
            response: Response stream receiving live output from every foundation.

        Returns:
            BlueGreenResult: Per-foundation outcomes and stage timeline.

        Raises:
            ConfigurationError: Raised when the environment has no foundations.
            AvailabilityError: Raised when a foundation fails the precheck.
            PusherCreationError: Raised when a foundation push session cannot be prepared.
            BlueGreenPushError: Raised when any foundation failed its push.
            BlueGreenCommitError: Raised when deleting a venerable app failed.
        """

        writer = job_wrap_response(response)
        timeline: list[dict[str, object]] = [domain_build_stage_event(stage="precheck", status="started")]
        self._prechecker.precheck_assert_all_foundations_up(environment)
        timeline.append(domain_build_stage_event(stage="precheck", status="completed"))

        self._logger.info(
            "starting blue-green push of %s to %d foundation(s) in %s",
            deployment_info.app_name,
            len(environment.foundations),
            environment.name,
        )

        pushers: list[tuple[str, PusherPort]] = []
        try:
            for foundation_url in environment.foundations:
                pushers.append(
                    (
                        foundation_url,
                        self._bluegreen_create_pusher(environment, foundation_url, deployment_info, writer),
                    )
                )
            return self._bluegreen_run(
                environment=environment,
                app_path=app_path,
                deployment_info=deployment_info,
                pushers=pushers,
                writer=writer,
                timeline=timeline,
            )
        finally:
            self._bluegreen_clean_up(pushers=pushers, writer=writer, timeline=timeline)

    def _bluegreen_create_pusher(
        self,
        environment: Environment,
        foundation_url: str,
        deployment_info: DeploymentInfo,
        writer: SynchronizedResponseWriter,
    ) -> PusherPort:
        """Create the pusher for one foundation before any push starts.

        Raises:
            PusherCreationError: Raised when courier resources cannot be allocated.
        """

        try:
            return self._pusher_creator.pusher_creator_create(deployment_info, writer)
        except (OSError, ValueError, RuntimeError) as error:
            creation_error = PusherCreationError(foundation_url=foundation_url, cause=error)
            self._logger.error("%s", creation_error)
            writer.write(f"{creation_error}\n".encode("utf-8"))
            self._bluegreen_emit_outcome(
                event_type=DEPLOY_FAILURE_EVENT,
                environment=environment,
                deployment_info=deployment_info,
                description=str(creation_error),
                failed_foundations=(foundation_url,),
            )
            raise creation_error from error

    def _bluegreen_run(
        self,
        environment: Environment,
        app_path: str,
        deployment_info: DeploymentInfo,
        pushers: list[tuple[str, PusherPort]],
        writer: SynchronizedResponseWriter,
        timeline: list[dict[str, object]],
    ) -> BlueGreenResult:
        """Fan out push tasks, join them, and decide commit or rollback.

        Raises:
            BlueGreenPushError: Raised when any foundation failed its push.
            BlueGreenCommitError: Raised when deleting a venerable app failed.
        """

        with self._bluegreen_executor(len(pushers)) as executor:
            futures = [
                executor.submit(
                    self._bluegreen_push_foundation,
                    foundation_url,
                    pusher,
                    app_path,
                    deployment_info,
                    writer,
                )
                for foundation_url, pusher in pushers
            ]
            outcomes = tuple(future.result() for future in futures)

        for outcome in outcomes:
            timeline.append(
                domain_build_stage_event(
                    stage="push",
                    status="completed" if outcome.outcome_succeeded() else "failed",
                    foundation_url=outcome.foundation_url,
                    details={
                        "app_existed": outcome.app_existed,
                        "renamed": outcome.renamed,
                        "error_message": None if outcome.error is None else str(outcome.error),
                    },
                )
            )

        failed_outcomes = [outcome for outcome in outcomes if not outcome.outcome_succeeded()]
        if failed_outcomes:
            renamed_by_foundation = {outcome.foundation_url: outcome.renamed for outcome in outcomes}
            rollback_failures = self._bluegreen_fan_out(
                pushers=pushers,
                action=lambda foundation_url, pusher: pusher.pusher_rollback(
                    renamed_by_foundation[foundation_url], deployment_info
                ),
                stage="rollback",
                timeline=timeline,
            )
            failures = {outcome.foundation_url: str(outcome.error) for outcome in failed_outcomes}
            error = BlueGreenPushError(failures=failures, rollback_failures=rollback_failures)
            self._logger.error("blue-green push of %s failed: %s", deployment_info.app_name, error)
            self._bluegreen_emit_outcome(
                event_type=DEPLOY_FAILURE_EVENT,
                environment=environment,
                deployment_info=deployment_info,
                description=str(error),
                failed_foundations=tuple(failures),
            )
            raise error

        commit_failures = self._bluegreen_fan_out(
            pushers=pushers,
            action=lambda foundation_url, pusher: pusher.pusher_delete_venerable(deployment_info, foundation_url),
            stage="commit",
            timeline=timeline,
        )
        if commit_failures:
            error = BlueGreenCommitError(failures=commit_failures)
            self._logger.error("commit of %s failed: %s", deployment_info.app_name, error)
            self._bluegreen_emit_outcome(
                event_type=DEPLOY_FAILURE_EVENT,
                environment=environment,
                deployment_info=deployment_info,
                description=str(error),
                failed_foundations=tuple(commit_failures),
            )
            raise error

        self._logger.info("blue-green push of %s succeeded", deployment_info.app_name)
        self._bluegreen_emit_outcome(
            event_type=DEPLOY_SUCCESS_EVENT,
            environment=environment,
            deployment_info=deployment_info,
            description=f"deployed {deployment_info.app_name} to {len(pushers)} foundation(s)",
        )
        return BlueGreenResult(
            environment_name=environment.name,
            app_name=deployment_info.app_name,
            outcomes=outcomes,
            timeline=timeline,
        )

    def _bluegreen_push_foundation(
        self,
        foundation_url: str,
        pusher: PusherPort,
        app_path: str,
        deployment_info: DeploymentInfo,
        writer: SynchronizedResponseWriter,
    ) -> FoundationPushOutcome:
        """Run login, existence check, and push for one foundation.

        Failures are captured in the returned outcome and never raised, so one
        foundation cannot abort the others.

        Returns:
            FoundationPushOutcome: Captured task result.

        Raises:
            RuntimeError: This task does not raise runtime errors.
        """

        app_exists = False
        try:
            pusher.pusher_login(foundation_url, deployment_info, writer)
            app_exists = pusher.pusher_exists(deployment_info.app_name)
            pusher.pusher_push(app_path, app_exists, deployment_info, writer)
        except Exception as error:  # pylint: disable=broad-exception-caught
            self._logger.error("push to %s failed: %s", foundation_url, error)
            return FoundationPushOutcome(
                foundation_url=foundation_url,
                app_existed=app_exists,
                renamed=pusher.pusher_has_renamed(),
                error=error,
            )
        return FoundationPushOutcome(
            foundation_url=foundation_url,
            app_existed=app_exists,
            renamed=pusher.pusher_has_renamed(),
        )

    def _bluegreen_fan_out(
        self,
        pushers: list[tuple[str, PusherPort]],
        action: _FoundationAction,
        stage: str,
        timeline: list[dict[str, object]],
    ) -> dict[str, str]:
        """Run one action concurrently on every foundation and collect failures.

        Returns:
            dict[str, str]: Failure text keyed by foundation URL.

        Raises:
            RuntimeError: Action failures are collected, not raised.
        """

        def _run(foundation_url: str, pusher: PusherPort) -> Exception | None:
            try:
                action(foundation_url, pusher)
            except Exception as error:  # pylint: disable=broad-exception-caught
                self._logger.error("%s on %s failed: %s", stage, foundation_url, error)
                return error
            return None

        with self._bluegreen_executor(len(pushers)) as executor:
            futures = [(foundation_url, executor.submit(_run, foundation_url, pusher)) for foundation_url, pusher in pushers]
            results = [(foundation_url, future.result()) for foundation_url, future in futures]

        failures: dict[str, str] = {}
        for foundation_url, error in results:
            timeline.append(
                domain_build_stage_event(
                    stage=stage,
                    status="completed" if error is None else "failed",
                    foundation_url=foundation_url,
                    details=None if error is None else {"error_message": str(error)},
                )
            )
            if error is not None:
                failures[foundation_url] = str(error)
        return failures

    def _bluegreen_clean_up(
        self,
        pushers: list[tuple[str, PusherPort]],
        writer: SynchronizedResponseWriter,
        timeline: list[dict[str, object]],
    ) -> None:
        """Clean up every created pusher once, reporting failures without stopping.

        Raises:
            RuntimeError: Cleanup failures are logged and written to the response.
        """

        for foundation_url, pusher in pushers:
            try:
                pusher.pusher_clean_up()
            except Exception as error:  # pylint: disable=broad-exception-caught
                self._logger.error("cannot clean up after %s: %s", foundation_url, error)
                writer.write(f"cannot clean up after {foundation_url}: {error}\n".encode("utf-8"))
                timeline.append(
                    domain_build_stage_event(
                        stage="cleanup",
                        status="failed",
                        foundation_url=foundation_url,
                        details={"error_message": str(error)},
                    )
                )
                continue
            timeline.append(domain_build_stage_event(stage="cleanup", status="completed", foundation_url=foundation_url))

    def _bluegreen_executor(self, task_count: int) -> ThreadPoolExecutor:
        """Return an executor sized to one worker per foundation, capped when configured."""

        worker_count = max(1, task_count)
        if self._max_concurrency is not None:
            worker_count = min(worker_count, self._max_concurrency)
        return ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="bluegreen")

    def _bluegreen_emit_outcome(
        self,
        event_type: str,
        environment: Environment,
        deployment_info: DeploymentInfo,
        description: str,
        failed_foundations: tuple[str, ...] = (),
    ) -> None:
        """Emit a deployment outcome event when an event manager is configured."""

        if self._event_manager is None:
            return
        event = Event(
            event_type=event_type,
            data=DeploymentEventData(
                deployment_info=deployment_info,
                environment_name=environment.name,
                description=description,
                failed_foundations=failed_foundations,
            ),
        )
        try:
            self._event_manager.event_emit(event)
        except EventDispatchError as error:
            self._logger.warning("event handlers failed for %s: %s", event_type, error)
