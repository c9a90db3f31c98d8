# locations_api/logging_config.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the whole process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # pymongo is chatty at DEBUG; keep it at WARNING unless asked otherwise
    if logging.getLevelName(level) != logging.DEBUG:
        logging.getLogger("pymongo").setLevel(logging.WARNING)
