from enum import StrEnum


class ExtractionState(StrEnum):
    VALIDATING = "validating"
    INVOKING = "invoking"
    RETRYING_UNLISTED = "retrying_unlisted"
    CLASSIFYING = "classifying"
    RESPONDING = "responding"
    FAILED = "failed"
