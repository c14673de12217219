import re

# Accepted shapes: watch links, youtu.be short links and embed links.
_SUPPORTED_URL_PATTERN = re.compile(
    r"^(https?://)?(www\.)?(youtube\.com/(watch\?v=|embed/)|youtu\.be/)[\w-]+"
)

# First match wins.
_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/watch\?.*v=([^&\n?#]+)"),
    re.compile(r"youtube\.com/v/([^&\n?#]+)"),
    re.compile(r"youtube\.com/embed/([^&\n?#]+)"),
]


class UrlIdentifier:
    """Recognises supported YouTube URLs and pulls out the video id."""

    def is_supported_url(self, url: str) -> bool:
        if not url or not isinstance(url, str):
            return False
        return bool(_SUPPORTED_URL_PATTERN.match(url))

    def extract_id(self, url: str) -> str | None:
        """Extract video ID from a YouTube URL.

        Returns:
            The captured id of the first matching pattern, or None
        """
        if not url or not isinstance(url, str):
            return None

        for pattern in _VIDEO_ID_PATTERNS:
            match = pattern.search(url)
            if match and match.group(1):
                return match.group(1)
        return None
