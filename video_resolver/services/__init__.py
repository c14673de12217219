"""Service layer for the video stream resolver."""

from .rate_limit import RateLimiter
from .youtube import (
    ExtractionInvoker,
    FormatClassifier,
    QualityLadderBuilder,
    UrlIdentifier,
    YouTubeMetadataParser,
)

__all__ = [
    "ExtractionInvoker",
    "FormatClassifier",
    "QualityLadderBuilder",
    "RateLimiter",
    "UrlIdentifier",
    "YouTubeMetadataParser",
]
