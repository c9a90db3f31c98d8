# locations_api/config.py

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"
# Names both logging and uvicorn understand
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    """Read the service settings from the environment."""
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ConfigurationError(
            "MONGO_URI environment variable is not set. Set it in .env or in the environment."
        )

    port = os.getenv("PORT", str(DEFAULT_PORT))
    try:
        port = int(port)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {port!r}")

    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(
            f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )

    return Settings(
        mongo_uri=mongo_uri,
        host=os.getenv("HOST", DEFAULT_HOST),
        port=port,
        log_level=log_level,
    )
