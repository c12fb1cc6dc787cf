from .assistant import (
    ApplyResponse,
    DraftResponse,
    DraftUpdateRequest,
    ProposalResponse,
    SendPromptRequest,
    SessionResponse,
    ToolResponse,
    ToolResultResponse,
)
from .health import HealthResponse

__all__ = [
    "ApplyResponse",
    "DraftResponse",
    "DraftUpdateRequest",
    "HealthResponse",
    "ProposalResponse",
    "SendPromptRequest",
    "SessionResponse",
    "ToolResponse",
    "ToolResultResponse",
]
