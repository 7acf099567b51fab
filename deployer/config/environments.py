"""Environment descriptor loading from the YAML deployment configuration file."""

from __future__ import annotations

from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from deployer.domain import Environment, domain_normalize_instances

from .settings import SettingsLoadError


class EnvironmentsNotSpecifiedError(SettingsLoadError):
    """Raised when the configuration file declares no environments."""

    def __init__(self, config_path: str):
        super().__init__(f"environments key not specified in the configuration: {config_path}")
        self.config_path = config_path


class MissingParameterError(SettingsLoadError):
    """Raised when an environment lacks a required parameter."""


class InvalidEnvironmentError(SettingsLoadError):
    """Raised when environment entries contradict each other or themselves."""


class EnvironmentConfigModel(BaseModel):
    """Validated shape of one environment entry.

    Attributes:
        name: Environment name.
        domain: Route domain.
        foundations: Ordered foundation API URLs.
        skip_ssl: Whether TLS certificate verification is skipped.
        instances: Configured instance count, zero meaning one.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    domain: str = Field(default="")
    foundations: list[str] = Field(min_length=1)
    skip_ssl: bool = Field(default=False)
    instances: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("name must not be blank")
        return stripped_value

    @field_validator("foundations")
    @classmethod
    def _validate_foundations(cls, value: list[str]) -> list[str]:
        foundations = [foundation.strip() for foundation in value if foundation and foundation.strip()]
        if not foundations:
            raise ValueError("foundations must not be empty")
        return foundations

    def config_to_environment(self) -> Environment:
        """Convert validated entry into the immutable domain environment."""

        return Environment(
            name=self.name,
            foundations=tuple(self.foundations),
            domain=self.domain.strip(),
            skip_ssl=self.skip_ssl,
            instances=domain_normalize_instances(self.instances),
        )


def config_load_environments(config_path: str) -> dict[str, Environment]:
    """Load environments from a YAML file.

    Args:
        config_path: Path of the YAML configuration file.

    Returns:
        dict[str, Environment]: Environments keyed by lower-cased name.

    Raises:
        SettingsLoadError: Raised when the file cannot be read or parsed.
        EnvironmentsNotSpecifiedError: Raised when no environments are declared.
        MissingParameterError: Raised when an environment lacks name or foundations.
        InvalidEnvironmentError: Raised on duplicate names or foundations.
    """

    try:
        with open(config_path, "r", encoding="utf-8") as config_file:
            raw_text = config_file.read()
    except OSError as error:
        raise SettingsLoadError(f"cannot read environments configuration {config_path}: {error}") from error

    return config_parse_environments(raw_text, config_path=config_path)


def config_parse_environments(raw_text: str, config_path: str = "<memory>") -> dict[str, Environment]:
    """Parse environments from YAML text.

    Args:
        raw_text: YAML document text.
        config_path: Source label used in error messages.

    Returns:
        dict[str, Environment]: Environments keyed by lower-cased name.

    Raises:
        SettingsLoadError: Raised when YAML is malformed.
        EnvironmentsNotSpecifiedError: Raised when no environments are declared.
        MissingParameterError: Raised when an environment lacks name or foundations.
        InvalidEnvironmentError: Raised when two environments share a name ignoring case,
            or one environment lists the same foundation twice.
    """

    try:
        document: Any = yaml.safe_load(raw_text)
    except yaml.YAMLError as error:
        raise SettingsLoadError(f"cannot parse environments configuration {config_path}: {error}") from error

    raw_environments = document.get("environments") if isinstance(document, dict) else None
    if not raw_environments or not isinstance(raw_environments, list):
        raise EnvironmentsNotSpecifiedError(config_path)

    environments: dict[str, Environment] = {}
    for index, raw_environment in enumerate(raw_environments):
        if not isinstance(raw_environment, dict):
            raise MissingParameterError(f"environment #{index} in {config_path} must be a mapping")
        try:
            environment = EnvironmentConfigModel.model_validate(raw_environment).config_to_environment()
        except ValidationError as error:
            raise MissingParameterError(
                f"environment #{index} in {config_path} is missing a required parameter: {error}"
            ) from error
        duplicate_foundations = _config_duplicate_foundations(environment.foundations)
        if duplicate_foundations:
            raise InvalidEnvironmentError(
                f"environment {environment.name} in {config_path} lists foundations more than once: "
                f"{', '.join(duplicate_foundations)}"
            )
        environment_key = environment.name.lower()
        if environment_key in environments:
            raise InvalidEnvironmentError(
                f"environment {environment.name} in {config_path} duplicates "
                f"environment {environments[environment_key].name}; names are case-insensitive"
            )
        environments[environment_key] = environment

    return environments


def _config_duplicate_foundations(foundations: tuple[str, ...]) -> list[str]:
    # URLs compare without case or trailing slash.
    seen: set[str] = set()
    duplicates: list[str] = []
    for foundation_url in foundations:
        key = foundation_url.rstrip("/").lower()
        if key in seen and foundation_url not in duplicates:
            duplicates.append(foundation_url)
        seen.add(key)
    return duplicates
