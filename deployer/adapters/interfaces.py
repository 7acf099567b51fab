"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol


class CourierPort(Protocol):
    """Port definition for issuing platform commands against one foundation.

    Output-returning commands return the raw command output and raise
    `CourierError` carrying whatever output was produced before failing.
    """

    def courier_login(
        self,
        foundation_url: str,
        username: str,
        password: str,
        org: str,
        space: str,
        skip_ssl: bool,
    ) -> bytes:
        """Authenticate against the foundation and target org and space.

        Returns:
            bytes: Raw command output.

        Raises:
            CourierError: Raised when login fails.
        """

    def courier_push(self, app_name: str, app_path: str, instances: int) -> bytes:
        """Push application bits from a local directory.

        Returns:
            bytes: Raw command output.

        Raises:
            CourierError: Raised when push fails.
        """

    def courier_rename(self, app_name: str, new_app_name: str) -> bytes:
        """Rename an application.

        Returns:
            bytes: Raw command output.

        Raises:
            CourierError: Raised when rename fails.
        """

    def courier_delete(self, app_name: str) -> bytes:
        """Delete an application.

        Returns:
            bytes: Raw command output.

        Raises:
            CourierError: Raised when delete fails.
        """

    def courier_map_route(self, app_name: str, domain: str) -> bytes:
        """Map the application route on a domain.

        Returns:
            bytes: Raw command output.

        Raises:
            CourierError: Raised when route mapping fails.
        """

    def courier_logs(self, app_name: str) -> bytes:
        """Fetch recent platform logs for an application.

        Returns:
            bytes: Raw log output.

        Raises:
            CourierError: Raised when log retrieval fails.
        """

    def courier_exists(self, app_name: str) -> bool:
        """Return whether the application is deployed on the foundation.

        Returns:
            bool: True when the application exists.

        Raises:
            RuntimeError: Implementations should not raise runtime errors.
        """

    def courier_clean_up(self) -> None:
        """Release resources allocated by the courier.

        Returns:
            None: Cleanup is a side effect.

        Raises:
            OSError: Raised when scratch resources cannot be removed.
        """


class ArtifactFetcherPort(Protocol):
    """Port definition for retrieving and extracting deployable artifacts."""

    def artifact_fetch(self, artifact_url: str, manifest: str) -> str:
        """Download and extract an artifact into a scratch directory.

        Args:
            artifact_url: Zip artifact URL.
            manifest: Optional manifest text written beside the bits.

        Returns:
            str: Directory holding extracted application bits.

        Raises:
            ArtifactFetchError: Raised when download or extraction fails.
        """

    def artifact_clean_up(self, app_path: str) -> None:
        """Remove a directory previously returned by `artifact_fetch`.

        Returns:
            None: Cleanup is a side effect.

        Raises:
            OSError: Raised when the directory cannot be removed.
        """
