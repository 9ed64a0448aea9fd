"""
HTTP client for the upload backend.

Requests are credentialed: one ``aiohttp.ClientSession`` with a cookie jar
is kept for the client's lifetime, so cookies set by the session endpoint
travel with the upload.
"""

import asyncio
from contextlib import ExitStack
from typing import Any, Dict, Optional, Sequence

import aiohttp
from loguru import logger
from pydantic import ValidationError

from ...core.domain.files import FileCandidate
from ...core.exceptions import (
    TRANSPORT_ERROR_MESSAGE, UPLOAD_FAILED_MESSAGE, SessionUnavailable, TransmissionFailed
)
from ...core.interfaces.lifecycle import IComponent
from ...core.interfaces.transport import IBackendClient, ProgressCallback
from .payload import ProgressPayload, build_form
from .schemas import ErrorPayload, SessionDescriptor


async def _ignore_progress(sent: int, total: Optional[int]) -> None:
    return None


class BackendClient(IBackendClient, IComponent):
    """aiohttp implementation of the backend contract."""

    def __init__(self, base_url: str, request_timeout: float = 300.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "BackendClient"

    @property
    def base_url(self) -> str:
        return self._base_url

    async def start(self) -> None:
        if self._session is not None and not self._session.closed:
            return
        self._session = aiohttp.ClientSession(
            timeout=self._timeout,
            # accept cookies from IP hosts such as 127.0.0.1
            cookie_jar=aiohttp.CookieJar(unsafe=True)
        )
        logger.debug(f"Backend client started for {self._base_url}")

    async def stop(self) -> None:
        if self._session is None:
            return
        await self._session.close()
        self._session = None
        logger.debug("Backend client stopped")

    async def check_health(self) -> Dict[str, Any]:
        running = self._session is not None and not self._session.closed
        return {
            'healthy': running,
            'status': 'running' if running else 'stopped',
            'details': {'base_url': self._base_url}
        }

    async def __aenter__(self) -> 'BackendClient':
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    async def fetch_session_descriptor(self) -> str:
        url = f"{self._base_url}/session-url"
        try:
            async with self._http().get(url) as response:
                if not 200 <= response.status < 300:
                    raise SessionUnavailable(details=f"HTTP {response.status} from {url}")
                body = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SessionUnavailable(details=f"{type(e).__name__}: {e}") from e

        try:
            descriptor = SessionDescriptor.model_validate_json(body)
        except ValidationError as e:
            raise SessionUnavailable(details=f"Invalid session descriptor: {e}") from e

        return descriptor.url

    async def upload(
        self,
        session_id: str,
        files: Sequence[FileCandidate],
        on_progress: Optional[ProgressCallback] = None
    ) -> int:
        url = f"{self._base_url}/upload/{session_id}"

        with ExitStack() as stack:
            streams = [(f, stack.enter_context(f.open())) for f in files]
            payload = ProgressPayload(build_form(streams), on_progress or _ignore_progress)
            logger.debug(f"POST {url}: {len(files)} file(s), {payload.size} bytes")

            try:
                async with self._http().post(url, data=payload) as response:
                    if 200 <= response.status < 300:
                        return response.status
                    message = await self._error_message(response)
                    raise TransmissionFailed(message, status=response.status)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(f"Upload to {url} failed in transport: {type(e).__name__}: {e}")
                raise TransmissionFailed(TRANSPORT_ERROR_MESSAGE, details=str(e)) from e

    def _http(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            raise RuntimeError("Backend client is not started")
        return self._session

    async def _error_message(self, response: aiohttp.ClientResponse) -> str:
        """The server's ``{"error": ...}`` message, or the generic one."""
        try:
            body = await response.text()
            return ErrorPayload.model_validate_json(body).error
        except (ValidationError, aiohttp.ClientError, UnicodeDecodeError):
            return UPLOAD_FAILED_MESSAGE
