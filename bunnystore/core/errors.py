"""
BUNNYSTORE - Custom Exception Classes

Defines the exception hierarchy for the package.
All custom exceptions inherit from BunnyStoreError.
"""

from typing import Optional


class BunnyStoreError(Exception):
    """Base exception for all BUNNYSTORE errors."""

    pass


class ConfigurationError(BunnyStoreError):
    """Raised when there are configuration issues."""

    pass


class CacheError(BunnyStoreError):
    """Raised when the key/value cache store cannot persist a value."""

    pass


class TransportError(BunnyStoreError):
    """Raised when a request to the storage zone fails or returns an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WriteError(TransportError):
    """Raised when an object upload is rejected."""

    pass


class DeleteError(TransportError):
    """Raised when an object or directory cannot be deleted."""

    pass


class ReadError(TransportError):
    """Raised when an object cannot be opened for reading."""

    pass


class MetadataError(TransportError):
    """Raised when a metadata probe does not return 200."""

    pass
