import json
import math
from typing import Any

from video_resolver.core.exceptions import MetadataParseError
from video_resolver.core.models import RawFormat, VideoMetadata
from video_resolver.utils.logger import get_logger

logger = get_logger(__name__)


def _to_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _to_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def _to_int(value: Any) -> int | None:
    number = _to_number(value)
    if number is None:
        return None
    return int(number)


class YouTubeMetadataParser:
    """Turns the tool's JSON dump into VideoMetadata.

    Every field of the dump is optional; anything missing or of the wrong
    type is treated as absent.
    """

    def parse_output(self, stdout: str) -> VideoMetadata:
        """Parse the tool's standard output.

        Raises:
            MetadataParseError: output is not a JSON object
        """
        try:
            info = json.loads(stdout)
        except (TypeError, ValueError) as e:
            raise MetadataParseError(f"Invalid JSON from extraction tool: {e}") from e

        if not isinstance(info, dict):
            raise MetadataParseError(
                f"Expected a JSON object from extraction tool, got {type(info).__name__}"
            )
        return self.parse_info(info)

    def parse_info(self, info: dict[str, Any]) -> VideoMetadata:
        raw_formats = info.get("formats")
        if not isinstance(raw_formats, list):
            raw_formats = []

        formats = [self.parse_format(f) for f in raw_formats if isinstance(f, dict)]
        logger.debug(f"[METADATA_PARSER] Parsed {len(formats)} formats for {info.get('id')}")

        return VideoMetadata(
            id=_to_str(info.get("id")),
            title=_to_str(info.get("title")),
            description=_to_str(info.get("description")),
            duration=_to_number(info.get("duration")),
            thumbnail_url=_to_str(info.get("thumbnail")),
            uploader=_to_str(info.get("uploader")),
            upload_date=_to_str(info.get("upload_date")),
            view_count=_to_int(info.get("view_count")),
            formats=formats,
        )

    def parse_format(self, fmt: dict[str, Any]) -> RawFormat:
        return RawFormat(
            url=_to_str(fmt.get("url")),
            extension=_to_str(fmt.get("ext")),
            video_codec=_to_str(fmt.get("vcodec")),
            audio_codec=_to_str(fmt.get("acodec")),
            height=_to_int(fmt.get("height")),
            width=_to_int(fmt.get("width")),
            fps=_to_number(fmt.get("fps")),
            average_bitrate_kbps=_to_number(fmt.get("abr")),
            file_size_bytes=_to_int(fmt.get("filesize")),
        )
