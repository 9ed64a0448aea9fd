"""
Transport interface for the upload backend.

The backend exposes two endpoints: a session descriptor read and a
multipart upload addressed by session id.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Sequence

from ..domain.files import FileCandidate

# (bytes_sent, total_bytes); total is None when the body size is unknown
ProgressCallback = Callable[[int, Optional[int]], Awaitable[None]]


class IBackendClient(ABC):
    """Interface for the upload backend client."""

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base endpoint all requests are addressed to."""
        pass

    @abstractmethod
    async def fetch_session_descriptor(self) -> str:
        """
        Read the current session URL from the backend.

        Returns:
            The session URL

        Raises:
            SessionUnavailable: On a non-success status, an invalid body or
                a transport error
        """
        pass

    @abstractmethod
    async def upload(
        self,
        session_id: str,
        files: Sequence[FileCandidate],
        on_progress: Optional[ProgressCallback] = None
    ) -> int:
        """
        Send ``files`` as one multipart request to the session's endpoint.

        Returns:
            The success status code

        Raises:
            TransmissionFailed: On a non-success status (carrying the
                server's error message when it sent one) or a transport error
        """
        pass
