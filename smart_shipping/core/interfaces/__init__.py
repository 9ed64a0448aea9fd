"""
Interfaces defining the contracts between core services and infrastructure.
"""

from .lifecycle import IComponent, IHealthCheckable, IStartable, IStoppable
from .messaging import IEventBus
from .transport import IBackendClient, ProgressCallback
from .upload import (
    IPreviewResolver, ISessionManager, IUploadOrchestrator, IUploadSubmission
)

__all__ = [
    "IComponent",
    "IHealthCheckable",
    "IStartable",
    "IStoppable",
    "IEventBus",
    "IBackendClient",
    "ProgressCallback",
    "IPreviewResolver",
    "ISessionManager",
    "IUploadOrchestrator",
    "IUploadSubmission",
]
