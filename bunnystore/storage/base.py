"""
BUNNYSTORE - Storage Adapter Interface

Defines the capability set a host storage layer expects from an adapter.
Failures are reported as return values (None, False, [] or a failed
TransferOutcome), never raised.
"""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, List, Optional, Union

from bunnystore.core.types import (
    DirectoryEntry,
    ObjectMetadata,
    ReadResult,
    StreamResult,
    TransferOutcome,
    VisibilityResult,
    WriteResult,
)

Contents = Union[bytes, str]


class StorageAdapter(ABC):
    """Interface for filesystem-like storage adapters."""

    @abstractmethod
    def write(self, path: str, contents: Contents, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        """Write a new file."""
        pass

    @abstractmethod
    def write_stream(self, path: str, stream: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        """Write a new file from a stream. The adapter closes the stream."""
        pass

    @abstractmethod
    def update(self, path: str, contents: Contents, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        """Replace a file."""
        pass

    @abstractmethod
    def update_stream(self, path: str, stream: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        """Replace a file from a stream."""
        pass

    @abstractmethod
    def rename(self, path: str, new_path: str) -> TransferOutcome:
        """Move a file."""
        pass

    @abstractmethod
    def copy(self, path: str, new_path: str) -> TransferOutcome:
        """Duplicate a file."""
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Delete a file."""
        pass

    @abstractmethod
    def delete_dir(self, dirname: str) -> bool:
        """Delete a directory and its contents."""
        pass

    @abstractmethod
    def create_dir(self, dirname: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Create a directory."""
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: str) -> Dict[str, Any]:
        """Set the visibility of a file."""
        pass

    @abstractmethod
    def has(self, path: str) -> bool:
        """Check whether a file exists."""
        pass

    @abstractmethod
    def read(self, path: str) -> Optional[ReadResult]:
        """Read a file into memory."""
        pass

    @abstractmethod
    def read_stream(self, path: str) -> Optional[StreamResult]:
        """Open a file for streaming reads. The caller closes the stream."""
        pass

    @abstractmethod
    def list_contents(self, directory: str = "", recursive: bool = False) -> List[DirectoryEntry]:
        """List the contents of a directory."""
        pass

    @abstractmethod
    def get_metadata(self, path: str) -> Optional[ObjectMetadata]:
        """Get all metadata of a file."""
        pass

    @abstractmethod
    def get_size(self, path: str) -> Optional[int]:
        """Get the size of a file in bytes."""
        pass

    @abstractmethod
    def get_mimetype(self, path: str) -> Optional[str]:
        """Get the MIME type of a file."""
        pass

    @abstractmethod
    def get_timestamp(self, path: str) -> Optional[int]:
        """Get the last-modified time of a file as epoch seconds."""
        pass

    @abstractmethod
    def get_visibility(self, path: str) -> Optional[VisibilityResult]:
        """Get the visibility of a file."""
        pass
