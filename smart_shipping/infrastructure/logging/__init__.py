"""
Logging infrastructure for the application.
"""

from .setup import setup_logging

__all__ = [
    "setup_logging",
]
