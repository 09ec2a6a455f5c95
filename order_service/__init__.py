"""Order ingestion, caching and lookup service."""

__version__ = "0.1.0"
