"""
Utility functions for docr-tools.
"""

from .error_sanitizer import error_response, sanitize_error
from .logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "error_response",
    "get_logger",
    "sanitize_error",
]
