"""Core enums."""

from .extraction_state import ExtractionState
from .invoke_error_type import InvokeErrorType
from .stream_kind import StreamKind
from .tool_error_kind import ToolErrorKind

__all__ = [
    "ExtractionState",
    "InvokeErrorType",
    "StreamKind",
    "ToolErrorKind",
]
