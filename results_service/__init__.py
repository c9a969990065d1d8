"""In-memory student examination results service."""

__version__ = "1.0.0"
