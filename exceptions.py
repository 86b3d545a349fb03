"""Custom exception hierarchy for the headless Jasmine runner."""
from __future__ import annotations

from typing import Any, List, Optional


class JasmineError(Exception):
    """Base exception for all runner errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# Harness server exceptions
class ServerError(JasmineError):
    """Base exception for harness server errors."""

    pass


class ServerLaunchError(ServerError):
    """Raised when the server process cannot be spawned."""

    def __init__(self, message: str, command: Optional[List[str]] = None):
        details = {"command": " ".join(command)} if command else {}
        super().__init__(message, details)
        self.command = command


class ServerUnreachableError(ServerError):
    """Raised when the server does not answer before the readiness timeout."""

    def __init__(self, port: int, timeout: float):
        super().__init__(
            f"Jasmine server did not answer on port {port} within {timeout}s",
            {"port": port, "timeout": timeout},
        )
        self.port = port
        self.timeout = timeout


# Suite execution exceptions
class SuiteExecutionError(JasmineError):
    """Base exception for errors while running a suite."""

    pass


class LaunchFailureError(SuiteExecutionError):
    """Raised when the headless browser cannot be spawned for a target."""

    def __init__(self, message: str, binary: Optional[str] = None, target: Optional[str] = None):
        details = {}
        if binary:
            details["binary"] = binary
        if target:
            details["target"] = target
        super().__init__(message, details)
        self.binary = binary
        self.target = target


class MalformedPayloadError(SuiteExecutionError):
    """Raised when the runner output is not a valid result payload."""

    def __init__(self, message: str, raw: Optional[str] = None):
        details = {"raw_preview": raw[:200] if raw else None}
        super().__init__(message, details)
        self.raw = raw


# Spec loading exceptions
class SpecLoadError(JasmineError):
    """Raised when spec files cannot be located."""

    def __init__(self, message: str, path: Optional[str] = None):
        details = {"path": path} if path else {}
        super().__init__(message, details)
        self.path = path


# Configuration exceptions
class ConfigurationError(JasmineError):
    """Raised when configuration is invalid."""

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when a required config file is not found."""

    def __init__(self, file_path: str):
        super().__init__(f"Configuration file not found: {file_path}", {"file_path": file_path})
        self.file_path = file_path
