"""Deployer runtime settings read from process environment and `.env`."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deployer.observability import observability_resolve_level


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings or environment configuration cannot be loaded."""


class AppSettings(BaseSettings):
    """Application settings for the deployer runtime.

    Environment variable names map directly to field names in uppercase.
    Example: `cf_username` reads from `CF_USERNAME`.

    Attributes:
        application_host: Host interface for web server binding.
        port: Web server port.
        cf_username: Default platform username.
        cf_password: Default platform password.
        environments_config_path: YAML file describing deployment environments.
        log_level: Logger level name.
        max_foundation_concurrency: Optional cap on concurrent foundation tasks.
        precheck_timeout_seconds: Foundation availability check timeout.
        cf_binary: Executable name or path of the `cf` CLI.
        cf_command_timeout_seconds: Upper bound for each `cf` command.
        artifact_timeout_seconds: Artifact download timeout.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    application_host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    cf_username: str = Field(min_length=1)
    cf_password: str = Field(min_length=1, repr=False)
    environments_config_path: str = Field(default="config.yml", min_length=1)
    log_level: str = Field(default="INFO")
    max_foundation_concurrency: int | None = Field(default=None, ge=1)
    precheck_timeout_seconds: float = Field(default=15.0, gt=0)
    cf_binary: str = Field(default="cf", min_length=1)
    cf_command_timeout_seconds: float = Field(default=600.0, gt=0)
    artifact_timeout_seconds: float = Field(default=120.0, gt=0)

    @field_validator("cf_username", "cf_password", "environments_config_path", "cf_binary")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("setting must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        observability_resolve_level(normalized_value)
        return normalized_value


def config_load_settings() -> AppSettings:
    """Build settings once at startup, failing fast on missing credentials.

    Returns:
        AppSettings: Settings with platform credentials and runtime limits.

    Raises:
        SettingsLoadError: Raised when a field is missing or fails validation.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Set CF_USERNAME, CF_PASSWORD and related variables. Details: {error}"
        ) from error
