from enum import StrEnum


class InvokeErrorType(StrEnum):
    TOOL_NOT_INSTALLED = "tool_not_installed"
    TIMED_OUT = "timed_out"
    TOOL_ERROR = "tool_error"
