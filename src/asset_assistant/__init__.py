"""Asset assistant package exports."""

from .config import Settings, settings
from .domain import AssistantSession, ToolExecutor
from .service import AssistantService

__all__ = [
    "AssistantService",
    "AssistantSession",
    "Settings",
    "ToolExecutor",
    "settings",
]
