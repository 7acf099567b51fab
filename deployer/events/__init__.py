"""Event layer package for lifecycle notification boundaries."""

from .interfaces import EventHandlerPort, EventManagerPort
from .log_handler import LoggingEventHandler
from .manager import EventDispatchError, EventManager

__all__ = [
	"EventDispatchError",
	"EventHandlerPort",
	"EventManager",
	"EventManagerPort",
	"LoggingEventHandler",
]
