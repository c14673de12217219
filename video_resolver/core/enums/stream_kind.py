from enum import StrEnum


class StreamKind(StrEnum):
    COMBINED = "combined"
    SEPARATE = "separate"
