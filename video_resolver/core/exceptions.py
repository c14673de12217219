from .enums.invoke_error_type import InvokeErrorType


class ExtractionToolError(Exception):
    """Raised when the extraction tool subprocess cannot produce output."""

    def __init__(self, error_type: InvokeErrorType, message: str = ""):
        """
        Initialize extraction tool error.

        Args:
            error_type: Which failure class occurred
            message: Raw tool message, kept verbatim for classification
        """
        self.error_type = error_type
        self.message = message
        super().__init__(f"{error_type}: {message}" if message else str(error_type))


class MetadataParseError(Exception):
    """Raised when the tool's standard output is not a JSON document."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
