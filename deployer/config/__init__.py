"""Configuration package for runtime settings and environment descriptors."""

from .environments import (
	EnvironmentConfigModel,
	EnvironmentsNotSpecifiedError,
	InvalidEnvironmentError,
	MissingParameterError,
	config_load_environments,
	config_parse_environments,
)
from .settings import AppSettings, SettingsLoadError, config_load_settings

__all__ = [
	"AppSettings",
	"EnvironmentConfigModel",
	"EnvironmentsNotSpecifiedError",
	"InvalidEnvironmentError",
	"MissingParameterError",
	"SettingsLoadError",
	"config_load_environments",
	"config_load_settings",
	"config_parse_environments",
]
