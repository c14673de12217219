from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums.stream_kind import StreamKind

NO_CODEC = "none"


class RawFormat(BaseModel):
    """One entry of the extraction tool's format list, normalised at the boundary."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    extension: str | None = None
    video_codec: str | None = None
    audio_codec: str | None = None
    height: int | None = None
    width: int | None = None
    fps: int | float | None = None
    average_bitrate_kbps: int | float | None = None
    file_size_bytes: int | None = None

    @property
    def has_video(self) -> bool:
        return self.video_codec != NO_CODEC

    @property
    def has_audio(self) -> bool:
        return self.audio_codec != NO_CODEC


class VideoMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    title: str | None = None
    description: str | None = None
    duration: int | float | None = None
    thumbnail_url: str | None = None
    uploader: str | None = None
    upload_date: str | None = None
    view_count: int | None = None
    formats: list[RawFormat] = Field(default_factory=list)


class ClassifiedFormat(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: RawFormat
    quality: str


class ClassifiedStreams(BaseModel):
    video_only: list[ClassifiedFormat] = Field(default_factory=list)
    audio_only: list[ClassifiedFormat] = Field(default_factory=list)
    combined: list[ClassifiedFormat] = Field(default_factory=list)
    dropped_count: int = 0


class PlayableStream(BaseModel):
    """One selectable entry of the quality ladder.

    Serialised with the field names the player front-end reads
    (``audioUrl``, ``size``, ``vcodec``, ``acodec``, ``type``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str | None = None
    audio_url: str | None = Field(default=None, alias="audioUrl")
    quality: str
    format: str | None = None
    size_bytes: int | None = Field(default=None, alias="size")
    fps: int | float | None = None
    width: int | None = None
    height: int | None = None
    video_codec: str | None = Field(default=None, alias="vcodec")
    audio_codec: str | None = Field(default=None, alias="acodec")
    kind: StreamKind = Field(alias="type")

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        if self.kind == StreamKind.COMBINED and payload.get("audioUrl") is None:
            payload.pop("audioUrl", None)
        return payload


class QualityLadder(BaseModel):
    streams: list[PlayableStream] = Field(default_factory=list)
    available_qualities: list[str] = Field(default_factory=list)

    @classmethod
    def from_streams(cls, streams: list[PlayableStream]) -> QualityLadder:
        return cls(streams=list(streams), available_qualities=[s.quality for s in streams])

    def stream_payloads(self) -> list[dict[str, Any]]:
        return [stream.to_payload() for stream in self.streams]
