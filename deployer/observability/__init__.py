"""Observability package for logger construction."""

from .logger import LOG_FORMAT, observability_create_logger, observability_resolve_level

__all__ = ["LOG_FORMAT", "observability_create_logger", "observability_resolve_level"]
