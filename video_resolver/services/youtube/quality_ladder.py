import re
from collections.abc import Sequence

from video_resolver.core.enums.stream_kind import StreamKind
from video_resolver.core.models import ClassifiedFormat, ClassifiedStreams, PlayableStream, QualityLadder
from video_resolver.utils.logger import get_logger

logger = get_logger(__name__)

_LEADING_NUMBER = re.compile(r"\d+")


def numeric_quality(label: str) -> int:
    """Numeric part of a quality label ("1080p" -> 1080); 0 when there is none."""
    match = _LEADING_NUMBER.match(label or "")
    return int(match.group(0)) if match else 0


class QualityLadderBuilder:
    """Builds the ranked, deduplicated list of playable streams."""

    def build(self, streams: ClassifiedStreams) -> QualityLadder:
        """Build the quality ladder from classified formats.

        Combined streams go first so they win quality ties against the
        synthesised video+audio pairs. Each video-only format is paired with
        the single highest-bitrate audio-only format.

        Args:
            streams: Output of FormatClassifier.classify

        Returns:
            QualityLadder sorted by numeric quality, highest first
        """
        candidates = [self._combined_entry(f) for f in streams.combined]

        if streams.video_only and streams.audio_only:
            best_audio = streams.audio_only[0]
            candidates.extend(self._separate_entry(v, best_audio) for v in streams.video_only)

        seen: set[str] = set()
        unique: list[PlayableStream] = []
        for candidate in candidates:
            if candidate.quality in seen:
                continue
            seen.add(candidate.quality)
            unique.append(candidate)

        unique.sort(key=lambda s: numeric_quality(s.quality), reverse=True)
        return QualityLadder.from_streams(unique)

    def _combined_entry(self, fmt: ClassifiedFormat) -> PlayableStream:
        raw = fmt.raw
        return PlayableStream(
            url=raw.url,
            quality=fmt.quality,
            format=raw.extension,
            size_bytes=raw.file_size_bytes,
            fps=raw.fps,
            width=raw.width,
            height=raw.height,
            video_codec=raw.video_codec,
            audio_codec=raw.audio_codec,
            kind=StreamKind.COMBINED,
        )

    def _separate_entry(self, video: ClassifiedFormat, audio: ClassifiedFormat) -> PlayableStream:
        raw = video.raw
        return PlayableStream(
            url=raw.url,
            audio_url=audio.raw.url,
            quality=video.quality,
            format=raw.extension,
            size_bytes=(raw.file_size_bytes or 0) + (audio.raw.file_size_bytes or 0),
            fps=raw.fps,
            width=raw.width,
            height=raw.height,
            video_codec=raw.video_codec,
            audio_codec=audio.raw.audio_codec,
            kind=StreamKind.SEPARATE,
        )


def pad_single_stream(ladder: QualityLadder, labels: Sequence[str]) -> QualityLadder:
    """Expand a one-entry ladder into placeholder entries at ``labels``.

    The placeholders all point at the single real stream. They only give a
    quality picker several options to render and do not describe real
    renditions.
    """
    if len(ladder.streams) != 1 or not labels:
        return ladder

    real_stream = ladder.streams[0]
    logger.info(
        f"[QUALITY_LADDER] Only {real_stream.quality} available, adding synthetic labels {list(labels)}"
    )
    padded = [
        real_stream.model_copy(update={"quality": label, "kind": StreamKind.COMBINED})
        for label in labels
    ]
    return QualityLadder.from_streams(padded)
