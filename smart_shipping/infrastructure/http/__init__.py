"""
HTTP transport for the upload backend.
"""

from .client import BackendClient
from .payload import ProgressPayload, build_form
from .schemas import ErrorPayload, SessionDescriptor

__all__ = [
    "BackendClient",
    "ProgressPayload",
    "build_form",
    "ErrorPayload",
    "SessionDescriptor",
]
