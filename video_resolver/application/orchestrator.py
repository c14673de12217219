"""Request-level controller for video stream resolution."""

from dataclasses import dataclass
from typing import Any

from video_resolver.core.config import AppConfig, get_config
from video_resolver.core.enums import ExtractionState, InvokeErrorType, ToolErrorKind
from video_resolver.core.exceptions import ExtractionToolError, MetadataParseError
from video_resolver.core.interfaces import IExtractionInvoker
from video_resolver.core.models import QualityLadder, VideoMetadata
from video_resolver.services.youtube.error_handler import classify_tool_error
from video_resolver.services.youtube.format_classifier import FormatClassifier
from video_resolver.services.youtube.metadata_parser import YouTubeMetadataParser
from video_resolver.services.youtube.quality_ladder import QualityLadderBuilder, pad_single_stream
from video_resolver.services.youtube.tool_invoker import ExtractionInvoker
from video_resolver.services.youtube.url_identifier import UrlIdentifier
from video_resolver.utils.logger import get_logger

logger = get_logger(__name__)

EMBED_FALLBACK_HINT = "Please use YouTube embed instead"


@dataclass(frozen=True)
class ExtractionOutcome:
    """HTTP status and body for one request; ``failed_at`` names the step that failed."""

    status_code: int
    body: dict[str, Any]
    state: ExtractionState
    failed_at: ExtractionState | None = None


class ExtractionOrchestrator:
    """Validates, extracts, classifies and ranks streams for one request.

    States run Validating -> Invoking -> (RetryingUnlisted) -> Classifying
    -> Responding; any step may end in Failed. Only an unlisted/unavailable
    tool error is retried, and only once, with the longer retry timeout.
    """

    def __init__(
        self,
        invoker: IExtractionInvoker | None = None,
        config: AppConfig | None = None,
        url_identifier: UrlIdentifier | None = None,
        parser: YouTubeMetadataParser | None = None,
        classifier: FormatClassifier | None = None,
        ladder_builder: QualityLadderBuilder | None = None,
    ):
        self.config = config or get_config()
        self.invoker = invoker or ExtractionInvoker(self.config)
        self.url_identifier = url_identifier or UrlIdentifier()
        self.parser = parser or YouTubeMetadataParser()
        self.classifier = classifier or FormatClassifier()
        self.ladder_builder = ladder_builder or QualityLadderBuilder()

    @property
    def _debug(self) -> bool:
        return self.config.server.debug

    def _failed(
        self, status_code: int, body: dict[str, Any], failed_at: ExtractionState
    ) -> ExtractionOutcome:
        logger.info(f"[ORCHESTRATOR] Failed while {failed_at} with {status_code}: {body.get('error')}")
        return ExtractionOutcome(status_code, body, ExtractionState.FAILED, failed_at)

    async def extract(self, url: Any) -> ExtractionOutcome:
        """Resolve ``url`` into the HTTP status and JSON body to send back."""
        if not url or not isinstance(url, str):
            return self._failed(400, {"error": "URL is required"}, ExtractionState.VALIDATING)
        if not self.url_identifier.is_supported_url(url):
            return self._failed(400, {"error": "Invalid YouTube URL"}, ExtractionState.VALIDATING)

        if self._debug:
            logger.debug(f"[ORCHESTRATOR] Extracting video from: {url}")

        if not await self.invoker.check_available():
            return self._failed(
                503,
                {
                    "error": "Video extraction service temporarily unavailable",
                    "fallback": EMBED_FALLBACK_HINT,
                },
                ExtractionState.INVOKING,
            )

        try:
            stdout = await self.invoker.invoke(url, self.config.extraction.timeout_seconds)
        except ExtractionToolError as e:
            if self._debug:
                logger.debug(f"[ORCHESTRATOR] Primary invocation failed: {e}")
            return await self._handle_tool_error(url, e)

        return self._classify(stdout)

    async def _handle_tool_error(self, url: str, error: ExtractionToolError) -> ExtractionOutcome:
        if error.error_type == InvokeErrorType.TOOL_NOT_INSTALLED:
            return self._failed(
                503,
                {"error": "Video extraction tool not available", "fallback": EMBED_FALLBACK_HINT},
                ExtractionState.INVOKING,
            )
        if error.error_type == InvokeErrorType.TIMED_OUT:
            return self._failed(
                408,
                {"error": "Request timeout", "details": "Video extraction took too long"},
                ExtractionState.INVOKING,
            )

        kind = classify_tool_error(error.message)
        if kind == ToolErrorKind.PRIVATE_VIDEO:
            return self._failed(
                403,
                {
                    "error": "Video is private and requires authentication",
                    "details": "This video is private and cannot be extracted without login",
                },
                ExtractionState.INVOKING,
            )
        if kind == ToolErrorKind.UNLISTED_OR_UNAVAILABLE:
            return await self._retry_unlisted(url)

        logger.warning(f"[ORCHESTRATOR] Unrecognised tool error, sending embed fallback: {error.message[:200]}")
        return ExtractionOutcome(
            200, self._fallback_body(url), ExtractionState.FAILED, ExtractionState.INVOKING
        )

    async def _retry_unlisted(self, url: str) -> ExtractionOutcome:
        logger.info(f"[ORCHESTRATOR] Retrying possibly unlisted video once: {url}")
        try:
            stdout = await self.invoker.invoke(
                url, self.config.extraction.unlisted_retry_timeout_seconds
            )
        except ExtractionToolError as e:
            logger.info(f"[ORCHESTRATOR] Unlisted video extraction also failed: {e}")
            return self._failed(
                403,
                {
                    "error": "Video is unlisted and cannot be accessed",
                    "details": "This unlisted video may have restricted access",
                },
                ExtractionState.RETRYING_UNLISTED,
            )

        outcome = self._classify(
            stdout,
            parse_error="Failed to process unlisted video information",
            parse_details="Video data could not be parsed",
        )
        if outcome.state == ExtractionState.RESPONDING:
            logger.info("[ORCHESTRATOR] Unlisted video extraction successful")
        return outcome

    def _classify(
        self,
        stdout: str,
        parse_error: str = "Failed to parse video information",
        parse_details: str | None = None,
    ) -> ExtractionOutcome:
        try:
            metadata = self.parser.parse_output(stdout)
        except MetadataParseError as e:
            logger.error(f"[ORCHESTRATOR] {e.message}")
            if parse_details is None:
                parse_details = (
                    "Internal server error" if self.config.server.is_production else e.message
                )
            return self._failed(
                500, {"error": parse_error, "details": parse_details}, ExtractionState.CLASSIFYING
            )

        streams = self.classifier.classify(metadata.formats)
        ladder = self.ladder_builder.build(streams)

        if self._debug:
            logger.debug(
                f"[ORCHESTRATOR] {metadata.title}: {len(metadata.formats)} raw formats, "
                f"{len(streams.video_only)} video-only, {len(streams.audio_only)} audio-only, "
                f"{len(streams.combined)} combined, {streams.dropped_count} dropped"
            )
            for stream in ladder.streams:
                logger.debug(
                    f"[ORCHESTRATOR]   - {stream.quality}: {stream.width}x{stream.height} ({stream.kind})"
                )

        if self.config.extraction.pad_single_stream:
            ladder = pad_single_stream(ladder, self.config.extraction.placeholder_qualities)

        return ExtractionOutcome(200, self._success_body(metadata, ladder), ExtractionState.RESPONDING)

    def _success_body(self, metadata: VideoMetadata, ladder: QualityLadder) -> dict[str, Any]:
        return {
            "id": metadata.id,
            "title": metadata.title,
            "description": metadata.description,
            "duration": metadata.duration,
            "thumbnail": metadata.thumbnail_url,
            "uploader": metadata.uploader,
            "upload_date": metadata.upload_date,
            "view_count": metadata.view_count,
            "streams": ladder.stream_payloads(),
            "isYouTube": True,
            "availableQualities": list(ladder.available_qualities),
        }

    def _fallback_body(self, url: str) -> dict[str, Any]:
        return {
            "id": self.url_identifier.extract_id(url),
            "title": "Video extraction unavailable",
            "description": (
                "Video extraction service is temporarily unavailable. Please use YouTube embed instead."
            ),
            "duration": 0,
            "thumbnail": None,
            "uploader": "Unknown",
            "upload_date": None,
            "view_count": 0,
            "streams": [],
            "isYouTube": True,
            "availableQualities": [],
            "fallback": True,
            "error": "Video extraction service unavailable",
        }
