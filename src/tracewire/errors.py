"""
tracewire error types.

Raised only where a caller configures or constructs something; capture,
flush and shutdown paths catch and log them instead.
"""

from typing import Any, Optional


class TracewireError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigurationError(TracewireError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("configuration_error", message, details)


class SerializationError(TracewireError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("serialization_error", message, details)


class TransportError(TracewireError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("transport_error", message, {"status_code": status_code} if status_code else None)
        self.status_code = status_code


class ShutdownInProgressError(TracewireError):
    def __init__(self, message: str = "Process shutdown already in progress"):
        super().__init__("shutdown_in_progress", message)
