from enum import StrEnum


class ToolErrorKind(StrEnum):
    """Classification of the extraction tool's free-text error output."""

    PRIVATE_VIDEO = "private_video"
    UNLISTED_OR_UNAVAILABLE = "unlisted_or_unavailable"
    OTHER = "other"
