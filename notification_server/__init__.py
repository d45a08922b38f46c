"""Pull-based notification storage and retrieval service."""

__version__ = "0.1.0"
