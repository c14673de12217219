import logging
import sys

_root_logger_configured = False
_log_level = logging.INFO


def configure_logging(debug: bool = False) -> None:
    """Set the process-wide log level from the debug toggle."""
    global _log_level  # noqa: PLW0603

    _log_level = logging.DEBUG if debug else logging.INFO
    _ensure_root_handler()
    logging.getLogger().setLevel(_log_level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("video_resolver"):
            logging.getLogger(name).setLevel(_log_level)


def _ensure_root_handler() -> None:
    global _root_logger_configured  # noqa: PLW0603

    if _root_logger_configured:
        return
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
        root_logger.setLevel(_log_level)
    _root_logger_configured = True


def get_logger(name: str) -> logging.Logger:
    _ensure_root_handler()

    logger = logging.getLogger(name)
    logger.setLevel(_log_level)

    return logger
