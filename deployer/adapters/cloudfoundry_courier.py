"""Cloud Foundry CLI courier implementation for foundation commands."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from typing import Final, Sequence

from .courier_errors import CourierCommandError, CourierTimeoutError
from .interfaces import CourierPort


class CloudFoundryCourier(CourierPort):
    """Courier running `cf` CLI commands inside a private CF_HOME scratch directory.

    Every courier owns its own CF_HOME, so concurrent couriers targeting
    different foundations never share login state.
    """

    _SCRATCH_PREFIX: Final[str] = "deployer-cf-home-"

    def __init__(
        self,
        cf_binary: str = "cf",
        command_timeout_seconds: float = 600.0,
        scratch_root: str | None = None,
    ):
        """Initialize courier and allocate its scratch directory.

        Args:
            cf_binary: Executable name or path of the `cf` CLI.
            command_timeout_seconds: Upper bound for each command.
            scratch_root: Optional parent directory for the CF_HOME scratch directory.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when config values are invalid.
            OSError: Raised when the scratch directory cannot be created.
        """

        normalized_cf_binary = cf_binary.strip()
        if not normalized_cf_binary:
            raise ValueError("cf_binary must not be blank")
        if command_timeout_seconds <= 0:
            raise ValueError("command_timeout_seconds must be > 0")

        self._cf_binary = normalized_cf_binary
        self._command_timeout_seconds = command_timeout_seconds
        self._cf_home = tempfile.mkdtemp(prefix=self._SCRATCH_PREFIX, dir=scratch_root)

    @property
    def cf_home(self) -> str:
        """Return the scratch directory used as CF_HOME."""

        return self._cf_home

    def courier_login(
        self,
        foundation_url: str,
        username: str,
        password: str,
        org: str,
        space: str,
        skip_ssl: bool,
    ) -> bytes:
        """Log in with `cf login` and target org and space."""

        arguments = ["login", "-a", foundation_url, "-u", username, "-p", password, "-o", org, "-s", space]
        if skip_ssl:
            arguments.append("--skip-ssl-validation")
        return self._courier_run(arguments, redacted_values=(password,))

    def courier_push(self, app_name: str, app_path: str, instances: int) -> bytes:
        """Push app bits with `cf push`."""

        return self._courier_run(["push", app_name, "-p", app_path, "-i", str(instances)])

    def courier_rename(self, app_name: str, new_app_name: str) -> bytes:
        """Rename an app with `cf rename`."""

        return self._courier_run(["rename", app_name, new_app_name])

    def courier_delete(self, app_name: str) -> bytes:
        """Delete an app with `cf delete -f`."""

        return self._courier_run(["delete", app_name, "-f"])

    def courier_map_route(self, app_name: str, domain: str) -> bytes:
        """Map `{app_name}.{domain}` with `cf map-route`."""

        return self._courier_run(["map-route", app_name, domain, "-n", app_name])

    def courier_logs(self, app_name: str) -> bytes:
        """Fetch recent logs with `cf logs --recent`."""

        return self._courier_run(["logs", app_name, "--recent"])

    def courier_exists(self, app_name: str) -> bool:
        """Return whether `cf app` finds the application.

        Args:
            app_name: Application name.

        Returns:
            bool: True when `cf app` exits successfully.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        try:
            self._courier_run(["app", app_name])
        except (CourierCommandError, CourierTimeoutError):
            return False
        return True

    def courier_clean_up(self) -> None:
        """Remove the CF_HOME scratch directory.

        Returns:
            None: Cleanup is a side effect.

        Raises:
            OSError: Raised when the directory exists but cannot be removed.
        """

        if os.path.isdir(self._cf_home):
            shutil.rmtree(self._cf_home)

    def _courier_run(self, arguments: Sequence[str], redacted_values: Sequence[str] = ()) -> bytes:
        """Run one `cf` command and return combined stdout and stderr.

        Args:
            arguments: Command arguments after the binary name.
            redacted_values: Argument values hidden from error messages.

        Returns:
            bytes: Combined command output.

        Raises:
            CourierCommandError: Raised when the command cannot start or exits non-zero.
            CourierTimeoutError: Raised when the command exceeds the timeout.
        """

        command = [self._cf_binary, *arguments]
        command_label = " ".join("*****" if argument in redacted_values else argument for argument in command[:3])
        environment = {**os.environ, "CF_HOME": self._cf_home, "CF_COLOR": "false"}

        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=environment,
                timeout=self._command_timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            raise CourierTimeoutError(
                f"{command_label} timed out after {self._command_timeout_seconds}s",
                output=bytes(error.output or b""),
            ) from error
        except OSError as error:
            raise CourierCommandError(f"{command_label} could not be started: {error}") from error

        output = bytes(completed.stdout or b"")
        if completed.returncode != 0:
            raise CourierCommandError(
                f"{command_label} exited with status {completed.returncode}",
                output=output,
                exit_code=completed.returncode,
            )
        return output
