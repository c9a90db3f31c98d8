# locations_api/exceptions.py


class ConfigurationError(Exception):
    """Raised when a required setting is missing or malformed."""


class StoreConnectionError(Exception):
    """Raised when the initial connection to MongoDB cannot be established."""
