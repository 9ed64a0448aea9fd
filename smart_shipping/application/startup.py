"""
Application startup and shutdown.

Builds the pipeline components from configuration, starts the ones that
hold resources in order and stops them in reverse.
"""

from typing import List, Optional

from loguru import logger

from ..core.domain.state import PipelineState
from ..core.interfaces.lifecycle import IComponent
from ..core.interfaces.transport import IBackendClient
from ..core.services.event_bus import EventBus
from ..core.services.intake import FileIntakeValidator
from ..core.services.notifications import NotificationCenter
from ..core.services.orchestrator import UploadOrchestrator
from ..core.services.preview import PreviewResolver
from ..core.services.session_manager import SessionManager
from ..infrastructure.config.models import ApplicationConfig
from ..infrastructure.http.client import BackendClient
from .pipeline import UploadPipeline


class ApplicationStartup:
    """
    Manages the pipeline's component lifecycle.

    The backend client can be injected, e.g. to talk to a test server;
    otherwise one is built for the resolved base URL.
    """

    def __init__(self, config: ApplicationConfig,
                 client: Optional[IBackendClient] = None) -> None:
        self._config = config
        self._client = client
        self._components: List[IComponent] = []
        self._started_components: List[IComponent] = []
        self._pipeline: Optional[UploadPipeline] = None

    @property
    def pipeline(self) -> UploadPipeline:
        if self._pipeline is None:
            raise RuntimeError("Application has not been started")
        return self._pipeline

    def build(self) -> UploadPipeline:
        """Create the components and wire them into a pipeline."""
        config = self._config

        if self._client is None:
            base_url = config.backend.resolve_base_url()
            self._client = BackendClient(base_url, config.backend.request_timeout)
        logger.info(f"Using backend {self._client.base_url}")

        event_bus = EventBus()
        notifications = NotificationCenter(event_bus)
        validator = FileIntakeValidator(config.upload.max_file_size)
        state = PipelineState(validator.summarize)

        sessions = SessionManager(
            self._client, state, event_bus, notifications,
            failure_auto_close=config.upload.session_error_display
        )
        orchestrator = UploadOrchestrator(
            self._client, state, validator, event_bus, notifications,
            result_display_delay=config.upload.result_display_delay
        )

        self._components = [event_bus]
        if isinstance(self._client, IComponent):
            self._components.append(self._client)

        self._pipeline = UploadPipeline(
            state, validator, sessions, orchestrator, PreviewResolver(),
            event_bus, notifications
        )
        return self._pipeline

    async def start_application(self) -> UploadPipeline:
        """Build the pipeline and start its components in order."""
        pipeline = self._pipeline or self.build()

        for component in self._components:
            try:
                await component.start()
                self._started_components.append(component)
                logger.debug(f"Started component: {component.name}")
            except Exception as e:
                logger.error(f"Failed to start component {component.name}: {e}")
                await self.stop_application()
                raise

        return pipeline

    async def stop_application(self) -> None:
        """Stop started components in reverse order."""
        if self._pipeline is not None:
            self._pipeline.close()

        for component in reversed(self._started_components):
            try:
                await component.stop()
                logger.debug(f"Stopped component: {component.name}")
            except Exception as e:
                logger.error(f"Error stopping component {component.name}: {e}")

        self._started_components.clear()

    async def __aenter__(self) -> UploadPipeline:
        return await self.start_application()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop_application()
