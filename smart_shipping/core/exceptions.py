from enum import Enum
from typing import Any, Optional

UPLOAD_FAILED_MESSAGE = "Upload failed"
TRANSPORT_ERROR_MESSAGE = "Error while sending files"


class ErrorCode(Enum):
    """Error codes"""
    UNKNOWN_ERROR = 10000
    CONFIG_ERROR = 10001
    SESSION_UNAVAILABLE = 10002
    NO_SESSION = 10003
    NO_ELIGIBLE_FILES = 10004
    TRANSMISSION_FAILED = 10005


class ShippingError(Exception):
    """Base error"""
    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigError(ShippingError):
    """Invalid or unreadable configuration"""
    def __init__(self, message: str, details: Any = None):
        super().__init__(ErrorCode.CONFIG_ERROR, message, details)


class SessionUnavailable(ShippingError):
    """The session descriptor could not be fetched"""
    def __init__(self, message: str = "Failed to connect to the server", details: Any = None):
        super().__init__(ErrorCode.SESSION_UNAVAILABLE, message, details)


class NoSession(ShippingError):
    """Submit attempted while no session is held"""
    def __init__(self, message: str = "No upload session available", details: Any = None):
        super().__init__(ErrorCode.NO_SESSION, message, details)


class NoEligibleFiles(ShippingError):
    """Submit attempted with no file under the size ceiling"""
    def __init__(self, message: str = "No files eligible for upload", details: Any = None):
        super().__init__(ErrorCode.NO_ELIGIBLE_FILES, message, details)


class TransmissionFailed(ShippingError):
    """The upload request failed or was rejected"""
    def __init__(
        self,
        message: str = UPLOAD_FAILED_MESSAGE,
        status: Optional[int] = None,
        details: Any = None
    ):
        self.status = status
        super().__init__(ErrorCode.TRANSMISSION_FAILED, message, details)
