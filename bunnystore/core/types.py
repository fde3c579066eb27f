"""
BUNNYSTORE - Core Types

Common types and dataclasses used throughout the package.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Dict, Optional

VISIBILITY_PUBLIC = "public"


class ObjectType(str, Enum):
    """Kind of entry in the storage zone."""

    FILE = "file"
    DIR = "dir"


@dataclass
class ObjectMetadata:
    """Metadata derived from the headers of a successful probe."""

    path: str
    size: int = 0  # Content-Length in bytes
    timestamp: int = 0  # Last-Modified as epoch seconds
    mimetype: Optional[str] = None
    type: ObjectType = ObjectType.FILE
    visibility: str = VISIBILITY_PUBLIC


@dataclass
class DirectoryEntry:
    """One entry of a directory listing."""

    basename: str
    path: str
    type: ObjectType


@dataclass
class WriteResult:
    """Result of a successful write."""

    path: str
    type: ObjectType = ObjectType.FILE
    visibility: str = VISIBILITY_PUBLIC
    contents: Optional[bytes] = None  # Only set by buffered writes
    mimetype: Optional[str] = None


@dataclass
class ReadResult:
    """Fully drained object contents."""

    path: str
    contents: bytes
    type: ObjectType = ObjectType.FILE


@dataclass
class StreamResult:
    """An opened remote object. The caller owns and must close ``stream``."""

    path: str
    stream: BinaryIO
    type: ObjectType = ObjectType.FILE


@dataclass
class VisibilityResult:
    """Visibility of a path."""

    path: str
    visibility: str = VISIBILITY_PUBLIC


class TransferOutcome(Enum):
    """
    Outcome of a compound rename or copy.

    The storage zone has no server-side move, so both are built from a
    read, a write and (for rename) a delete. Each step can fail on its own.
    """

    MOVED = "moved"  # Destination written, source deleted
    COPIED = "copied"  # Destination written, source untouched
    ORIGINAL_RETAINED = "original_retained"  # Destination written, source delete failed
    WRITE_FAILED = "write_failed"  # Source read, destination not written
    READ_FAILED = "read_failed"  # Nothing written

    @property
    def succeeded(self) -> bool:
        """True when the destination path now holds the content."""
        return self in (
            TransferOutcome.MOVED,
            TransferOutcome.COPIED,
            TransferOutcome.ORIGINAL_RETAINED,
        )


# Raw decoded listing entry: {"ObjectName": str, "IsDirectory": bool, ...}
RawEntry = Dict[str, Any]
