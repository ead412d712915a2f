"""Warranty claim lifecycle and customer notification service."""

__version__ = "0.1.0"
