"""
Lifecycle interfaces for components that hold resources between calls.

The event bus and the HTTP client are started before the pipeline is used
and stopped when the process shuts down.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IStartable(ABC):
    """Interface for components that can be started."""

    @abstractmethod
    async def start(self) -> None:
        """
        Start the component and acquire its resources.

        Raises:
            Exception: If the component fails to start.
        """
        pass


class IStoppable(ABC):
    """Interface for components that can be stopped."""

    @abstractmethod
    async def stop(self) -> None:
        """Release the component's resources. Stopping twice is allowed."""
        pass


class IHealthCheckable(ABC):
    """Interface for components that can report their health status."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """
        Check the health status of the component.

        Returns:
            Dict with 'healthy' (bool), 'status' (str) and 'details' (dict).
        """
        pass


class IComponent(IStartable, IStoppable, IHealthCheckable):
    """Base interface for components managed by the application startup."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the component name."""
        pass
