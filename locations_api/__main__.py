# locations_api/__main__.py

import logging

import uvicorn

from .config import load_settings
from .exceptions import ConfigurationError
from .logging_config import configure_logging
from .main import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.critical("%s", e)
        raise SystemExit(1)

    configure_logging(settings.log_level)
    logger.info("Server is running on port %d", settings.port)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
