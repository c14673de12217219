"""YouTube stream resolution services."""

from .error_handler import classify_tool_error
from .format_classifier import FormatClassifier
from .metadata_parser import YouTubeMetadataParser
from .quality_ladder import QualityLadderBuilder, numeric_quality, pad_single_stream
from .tool_invoker import ExtractionInvoker
from .url_identifier import UrlIdentifier

__all__ = [
    "classify_tool_error",
    "ExtractionInvoker",
    "FormatClassifier",
    "QualityLadderBuilder",
    "UrlIdentifier",
    "YouTubeMetadataParser",
    "numeric_quality",
    "pad_single_stream",
]
