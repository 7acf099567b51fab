"""Artifact fetcher downloading zip artifacts and extracting them for a push."""

from __future__ import annotations

import io
import os
import shutil
import tempfile
import zipfile
from typing import Final

import httpx

from .courier_errors import ArtifactExtractionError, ArtifactFetchError
from .interfaces import ArtifactFetcherPort

_FIX_YOUR_ZIP_MESSAGE: Final[str] = (
    "Please double check your zip compression method and that the correct files are zipped. "
    "Once you've confirmed that it's valid, please try again."
)


class ArtifactFetcher(ArtifactFetcherPort):
    """Fetch zip artifacts over HTTP and unpack them into scratch directories."""

    _USER_AGENT: Final[str] = "bluegreen-deployer/1.0 (Python/httpx)"
    _SCRATCH_PREFIX: Final[str] = "deployer-artifact-"
    _MANIFEST_FILE_NAME: Final[str] = "manifest.yml"

    def __init__(
        self,
        request_timeout_seconds: float = 120.0,
        scratch_root: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize artifact fetcher.

        Args:
            request_timeout_seconds: HTTP request timeout in seconds.
            scratch_root: Optional parent directory for extracted artifacts.
            transport: Optional httpx transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when timeout is not positive.
        """

        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._request_timeout_seconds = request_timeout_seconds
        self._scratch_root = scratch_root
        self._transport = transport

    def artifact_fetch(self, artifact_url: str, manifest: str = "") -> str:
        """Download an artifact, extract it, and write the optional manifest.

        Args:
            artifact_url: Zip artifact URL.
            manifest: Optional manifest text written as `manifest.yml`.

        Returns:
            str: Directory holding extracted application bits.

        Raises:
            ValueError: Raised when artifact URL is blank.
            ArtifactFetchError: Raised when the download fails.
            ArtifactExtractionError: Raised when the payload is not a valid zip.
        """

        normalized_artifact_url = artifact_url.strip()
        if not normalized_artifact_url:
            raise ValueError("artifact_url must not be blank")

        payload = self._artifact_download(normalized_artifact_url)
        app_path = tempfile.mkdtemp(prefix=self._SCRATCH_PREFIX, dir=self._scratch_root)
        try:
            self._artifact_extract(payload=payload, destination=app_path, artifact_url=normalized_artifact_url)
            if manifest.strip():
                manifest_path = os.path.join(app_path, self._MANIFEST_FILE_NAME)
                with open(manifest_path, "w", encoding="utf-8") as manifest_file:
                    manifest_file.write(manifest)
        except (ArtifactFetchError, OSError):
            shutil.rmtree(app_path, ignore_errors=True)
            raise
        return app_path

    def artifact_clean_up(self, app_path: str) -> None:
        """Remove an extracted artifact directory if it still exists."""

        if app_path and os.path.isdir(app_path):
            shutil.rmtree(app_path)

    def _artifact_download(self, artifact_url: str) -> bytes:
        """Execute one HTTP GET and return the artifact payload.

        Args:
            artifact_url: Zip artifact URL.

        Returns:
            bytes: Artifact payload.

        Raises:
            ArtifactFetchError: Raised for transport failures and non-success status.
        """

        try:
            with httpx.Client(
                timeout=self._request_timeout_seconds,
                follow_redirects=True,
                headers={"User-Agent": self._USER_AGENT},
                transport=self._transport,
            ) as client:
                response = client.get(artifact_url)
        except httpx.HTTPError as error:
            raise ArtifactFetchError(f"cannot get artifact {artifact_url}: {error}") from error

        if response.status_code != httpx.codes.OK:
            raise ArtifactFetchError(
                f"cannot get artifact {artifact_url}: HTTP {response.status_code} {response.reason_phrase}"
            )
        return response.content

    def _artifact_extract(self, payload: bytes, destination: str, artifact_url: str) -> None:
        """Extract zip payload into destination, refusing entries escaping it.

        Raises:
            ArtifactExtractionError: Raised for invalid archives or unsafe entry paths.
        """

        destination_root = os.path.realpath(destination)
        try:
            with zipfile.ZipFile(io.BytesIO(payload)) as archive:
                for member in archive.infolist():
                    target_path = os.path.realpath(os.path.join(destination_root, member.filename))
                    if os.path.commonpath([destination_root, target_path]) != destination_root:
                        raise ArtifactExtractionError(
                            f"cannot extract file from archive: {member.filename}: path escapes destination"
                        )
                archive.extractall(destination_root)
        except zipfile.BadZipFile as error:
            raise ArtifactExtractionError(
                f"cannot open zip file: {artifact_url}: {error}\n{_FIX_YOUR_ZIP_MESSAGE}"
            ) from error
