"""
Application layer: pipeline facade and component lifecycle.
"""

from .pipeline import UploadPipeline
from .startup import ApplicationStartup

__all__ = [
    "UploadPipeline",
    "ApplicationStartup",
]
