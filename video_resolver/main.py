import uvicorn

from video_resolver.core.config import get_config
from video_resolver.utils.logger import configure_logging, get_logger
from video_resolver.web.app import create_app

logger = get_logger(__name__)


def main() -> None:
    config = get_config()
    configure_logging(config.server.debug)

    logger.info(f"[MAIN] Video extraction server starting on port {config.server.port}")
    logger.info(f"[MAIN] Health check: http://localhost:{config.server.port}/api/health")

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        proxy_headers=config.server.trust_proxy,
        log_level="debug" if config.server.debug else "info",
    )


if __name__ == "__main__":
    main()
