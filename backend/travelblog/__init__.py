"""Private family travel blog API."""

__version__ = "0.1.0"
