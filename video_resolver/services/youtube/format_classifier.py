from collections.abc import Iterable

from video_resolver.core.models import ClassifiedFormat, ClassifiedStreams, RawFormat

UNKNOWN_QUALITY = "unknown"


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def video_quality_label(fmt: RawFormat) -> str:
    if fmt.height:
        return f"{_format_number(fmt.height)}p"
    return UNKNOWN_QUALITY


def audio_quality_label(fmt: RawFormat) -> str:
    if fmt.average_bitrate_kbps:
        return f"{_format_number(fmt.average_bitrate_kbps)}kbps"
    return UNKNOWN_QUALITY


class FormatClassifier:
    """Partitions raw formats into video-only, audio-only and combined entries."""

    def classify(self, formats: Iterable[RawFormat]) -> ClassifiedStreams:
        video_only: list[ClassifiedFormat] = []
        audio_only: list[ClassifiedFormat] = []
        combined: list[ClassifiedFormat] = []
        dropped = 0

        for fmt in formats:
            if fmt.has_video and not fmt.has_audio:
                video_only.append(ClassifiedFormat(raw=fmt, quality=video_quality_label(fmt)))
            elif fmt.has_audio and not fmt.has_video:
                audio_only.append(ClassifiedFormat(raw=fmt, quality=audio_quality_label(fmt)))
            elif fmt.has_video and fmt.has_audio:
                combined.append(ClassifiedFormat(raw=fmt, quality=video_quality_label(fmt)))
            else:
                dropped += 1

        # sorted() is stable, so equal keys keep the tool's order
        return ClassifiedStreams(
            video_only=sorted(video_only, key=lambda f: f.raw.height or 0, reverse=True),
            audio_only=sorted(
                audio_only, key=lambda f: f.raw.average_bitrate_kbps or 0, reverse=True
            ),
            combined=sorted(combined, key=lambda f: f.raw.height or 0, reverse=True),
            dropped_count=dropped,
        )
