"""
Core business exceptions for the contract_sources application.

This module defines a hierarchy of custom exceptions so that every failure
can be attributed to a specific stage: fetching, envelope decoding, payload
unwrapping, or writing to disk.
"""

from pathlib import Path
from typing import Optional, Sequence, Union


class ContractSourcesError(Exception):
    """Base exception for all component-specific errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(ContractSourcesError):
    """Raised for errors related to application configuration."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(ContractSourcesError):
    """Base class for errors related to external systems (network, API, etc.)."""
    pass


class TransportError(InfrastructureError):
    """Raised when the explorer cannot be reached or answers with an HTTP error."""
    pass


class RemoteError(InfrastructureError):
    """Raised when the explorer responds but reports a non-success status."""

    def __init__(self, status: str, message: str, detail: Optional[str] = None):
        self.status = status
        self.message = message
        self.detail = detail
        text = f"Explorer returned status {status!r}: {message}"
        if detail:
            text += f" ({detail})"
        super().__init__(text)


# --- Domain/Business Logic Errors ---

class DomainError(ContractSourcesError):
    """Base class for errors related to business logic failures."""
    pass


class DecodeError(DomainError):
    """Raised when JSON at either decode stage is malformed or mis-shaped."""
    pass


class MalformedPayloadError(DomainError):
    """Raised when a source payload is too short to strip its wrapping."""
    pass


class UnsafePathError(DomainError):
    """Raised when a source path would escape the destination root."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unsafe source path {path!r}: {reason}")


class PathCollisionError(DomainError):
    """Raised when several source paths resolve to the same file on disk."""

    def __init__(self, destination: Path, paths: Sequence[str]):
        self.destination = destination
        self.paths = tuple(paths)
        super().__init__(
            f"Source paths {list(self.paths)} all resolve to {destination}"
        )


class FilesystemError(DomainError):
    """Raised when a directory cannot be created or a file cannot be written."""

    def __init__(self, path: Path, cause: Union[OSError, UnicodeError]):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")
