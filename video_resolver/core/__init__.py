"""Core configuration, models and error types."""

from .config import AppConfig, get_config, reset_config, set_config
from .exceptions import ExtractionToolError, MetadataParseError
from .models import (
    ClassifiedFormat,
    ClassifiedStreams,
    PlayableStream,
    QualityLadder,
    RawFormat,
    VideoMetadata,
)

__all__ = [
    "AppConfig",
    "get_config",
    "reset_config",
    "set_config",
    "ExtractionToolError",
    "MetadataParseError",
    "ClassifiedFormat",
    "ClassifiedStreams",
    "PlayableStream",
    "QualityLadder",
    "RawFormat",
    "VideoMetadata",
]
