"""GeoJSON location features over HTTP, stored in MongoDB."""

__version__ = "1.0.0"
