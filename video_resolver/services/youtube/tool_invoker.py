import asyncio
import subprocess

from video_resolver.core.config import AppConfig, ExtractionConfig, get_config
from video_resolver.core.enums.invoke_error_type import InvokeErrorType
from video_resolver.core.exceptions import ExtractionToolError
from video_resolver.utils.logger import get_logger

logger = get_logger(__name__)


class ExtractionInvoker:
    """Runs the metadata extraction tool as a time-bounded subprocess.

    The blocking ``subprocess.run`` call is pushed to a worker thread so the
    event loop stays free while the tool runs. ``subprocess.run`` kills the
    child when the timeout elapses.
    """

    def __init__(self, config: AppConfig | None = None):
        self.config: ExtractionConfig = (config or get_config()).extraction

    def build_command(self, url: str) -> list[str]:
        """Build the fixed argument set for a metadata-only dump of one video."""
        return [
            self.config.tool_binary,
            "--dump-json",
            "--no-playlist",
            "--skip-download",
            *self.config.extra_args,
            "--user-agent",
            self.config.user_agent,
            "--extractor-args",
            f"youtube:player_client={self.config.player_client}",
            "--",
            url,
        ]

    def _run(self, cmd: list[str], timeout: float) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            cmd,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )

    async def probe_version(self) -> str | None:
        """Run ``--version`` and return the reported version, or None if unusable."""
        cmd = [self.config.tool_binary, "--version"]
        try:
            result = await asyncio.to_thread(self._run, cmd, self.config.probe_timeout_seconds)
        except FileNotFoundError:
            logger.warning(f"[TOOL_INVOKER] {self.config.tool_binary} is not installed")
            return None
        except subprocess.TimeoutExpired:
            logger.warning("[TOOL_INVOKER] Version probe timed out")
            return None
        except OSError as e:
            logger.warning(f"[TOOL_INVOKER] Version probe failed: {e}")
            return None

        if result.returncode != 0:
            logger.warning(f"[TOOL_INVOKER] Version probe failed: {(result.stderr or '')[:200]}")
            return None

        version = (result.stdout or "").strip()
        logger.debug(f"[TOOL_INVOKER] {self.config.tool_binary} version {version}")
        return version or "unknown"

    async def check_available(self) -> bool:
        return await self.probe_version() is not None

    async def invoke(self, url: str, timeout: float) -> str:
        """Dump the tool's JSON metadata for ``url``.

        Args:
            url: Video URL, already validated by the caller
            timeout: Upper bound for the subprocess in seconds

        Returns:
            The tool's standard output (expected to be one JSON document)

        Raises:
            ExtractionToolError: tool missing, timed out, or reported an error
        """
        cmd = self.build_command(url)
        logger.info(f"[TOOL_INVOKER] Extracting {url} (timeout {timeout:g}s)")

        try:
            result = await asyncio.to_thread(self._run, cmd, timeout)
        except FileNotFoundError as e:
            raise ExtractionToolError(InvokeErrorType.TOOL_NOT_INSTALLED, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionToolError(
                InvokeErrorType.TIMED_OUT, f"Extraction exceeded {timeout:g}s"
            ) from e
        except OSError as e:
            raise ExtractionToolError(InvokeErrorType.TOOL_ERROR, str(e)) from e

        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"Tool exited with status {result.returncode}"
            logger.warning(f"[TOOL_INVOKER] Tool reported an error: {message[:200]}")
            raise ExtractionToolError(InvokeErrorType.TOOL_ERROR, message)

        return result.stdout
