"""Classification of the extraction tool's error text."""

import re

from video_resolver.core.enums.tool_error_kind import ToolErrorKind


# Matching is case-sensitive; yt-dlp emits these phrases verbatim.
_PRIVATE_PATTERN = re.compile(r"Private video")
_UNLISTED_PATTERN = re.compile(r"unlisted")
_UNAVAILABLE_PATTERN = re.compile(r"Video unavailable")


def classify_tool_error(message: str | None) -> ToolErrorKind:
    """Classify a tool-reported error message.

    A message mentioning both a private video and "unlisted" is treated as
    unlisted, since unlisted videos are often reported with private-video
    wording.

    Args:
        message: Raw error text from the tool

    Returns:
        ToolErrorKind enum value
    """
    if not message:
        return ToolErrorKind.OTHER

    is_unlisted = bool(_UNLISTED_PATTERN.search(message))
    if _PRIVATE_PATTERN.search(message) and not is_unlisted:
        return ToolErrorKind.PRIVATE_VIDEO
    if is_unlisted or _UNAVAILABLE_PATTERN.search(message):
        return ToolErrorKind.UNLISTED_OR_UNAVAILABLE

    return ToolErrorKind.OTHER
