"""
BUNNYSTORE - Bunny CDN Storage Adapter

Implements the storage adapter interface on top of a Bunny storage zone,
with a sharded existence cache in front of existence checks.
"""

import io
import logging
import tempfile
from typing import Any, BinaryIO, Dict, List, Optional

from requests import RequestException

from bunnystore.core.errors import DeleteError, MetadataError, ReadError, WriteError
from bunnystore.core.types import (
    DirectoryEntry,
    ObjectMetadata,
    ReadResult,
    StreamResult,
    TransferOutcome,
    VisibilityResult,
    WriteResult,
)
from .base import Contents, StorageAdapter
from .client import BunnyStorageClient
from .existence import ExistenceCache
from .listing import list_directory_contents
from .mime import guess_mimetype

logger = logging.getLogger(__name__)


class BunnyCDNAdapter(StorageAdapter):
    """
    Storage adapter for a Bunny CDN storage zone.

    Every operation is a blocking request issued by the calling thread.
    The zone has no move, directory or ACL primitives, so rename and copy
    are built from read + write (+ delete), and directory creation and
    visibility changes are no-ops. Nothing here is atomic: concurrent
    callers on the same path can leave the cache and the zone disagreeing.
    """

    def __init__(
        self,
        client: BunnyStorageClient,
        existence_cache: ExistenceCache,
        assume_exists: bool = False,
        media_url: str = "",
    ):
        """
        Initialize adapter.

        Args:
            client: Storage zone client
            existence_cache: Cache of paths known to exist
            assume_exists: Report every path as existing without checking,
                for hosts that are past initialization and create missing
                media on demand
            media_url: Public base URL the zone is served from
        """
        self._client = client
        self._existence = existence_cache
        self._assume_exists = assume_exists
        self._media_url = media_url

    def write(self, path: str, contents: Contents, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        data = contents.encode("utf-8") if isinstance(contents, str) else bytes(contents)

        buffer = tempfile.TemporaryFile()
        try:
            buffer.write(data)
            buffer.seek(0)
        except BaseException:
            buffer.close()
            raise

        result = self.write_stream(path, buffer, config)
        if result is None:
            return None

        result.contents = data
        result.mimetype = guess_mimetype(path, data)
        return result

    def write_stream(self, path: str, stream: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        try:
            length = _remaining_length(stream)
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot determine upload size for {path}: {e}")
            stream.close()
            return None

        try:
            self._client.put_object(path, stream, length)
        except WriteError as e:
            logger.warning(f"Write failed for {path}: {e}")
            return None
        finally:
            stream.close()

        self._existence.mark(path)
        return WriteResult(path=path)

    def update(self, path: str, contents: Contents, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        # The object may not exist yet, so the delete outcome is irrelevant
        self.delete(path)
        return self.write(path, contents, config)

    def update_stream(self, path: str, stream: BinaryIO, config: Optional[Dict[str, Any]] = None) -> Optional[WriteResult]:
        self.delete(path)
        return self.write_stream(path, stream, config)

    def rename(self, path: str, new_path: str) -> TransferOutcome:
        outcome = self._transfer(path, new_path)
        if outcome is not TransferOutcome.COPIED:
            return outcome

        if not self.delete(path):
            logger.warning(f"Renamed {path} to {new_path} but the original could not be removed")
            return TransferOutcome.ORIGINAL_RETAINED

        return TransferOutcome.MOVED

    def copy(self, path: str, new_path: str) -> TransferOutcome:
        return self._transfer(path, new_path)

    def delete(self, path: str) -> bool:
        try:
            self._client.delete_object(path)
        except DeleteError as e:
            logger.warning(f"Delete failed for {path}: {e}")
            return False

        self._existence.unmark(path)
        return True

    def delete_dir(self, dirname: str) -> bool:
        return self.delete(dirname)

    def create_dir(self, dirname: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {}

    def set_visibility(self, path: str, visibility: str) -> Dict[str, Any]:
        return {}

    def has(self, path: str) -> bool:
        """
        Check whether a file exists.

        Paths with a query string are parameterized variants and always
        count as existing. Only positive answers are cached, so a missing
        path is probed again on every call.
        """
        if self._assume_exists:
            return True

        if "?" in path:
            return True

        if self._existence.contains(path):
            logger.debug(f"Existence cache hit for {path}")
            return True

        if self.get_metadata(path) is None:
            return False

        self._existence.mark(path)
        return True

    def read(self, path: str) -> Optional[ReadResult]:
        opened = self.read_stream(path)
        if opened is None:
            return None

        try:
            contents = opened.stream.read()
        except RequestException as e:
            logger.warning(f"Read of {path} was interrupted: {e}")
            return None
        finally:
            opened.stream.close()

        return ReadResult(path=path, contents=contents)

    def read_stream(self, path: str) -> Optional[StreamResult]:
        try:
            stream = self._client.fetch_object_stream(path)
        except ReadError as e:
            logger.warning(f"Cannot open {path}: {e}")
            return None

        return StreamResult(path=path, stream=stream)

    def list_contents(self, directory: str = "", recursive: bool = False) -> List[DirectoryEntry]:
        return list_directory_contents(self._client, directory, recursive)

    def get_metadata(self, path: str) -> Optional[ObjectMetadata]:
        try:
            return self._client.probe_metadata(path)
        except MetadataError as e:
            logger.debug(f"No metadata for {path}: {e}")
            return None

    def get_size(self, path: str) -> Optional[int]:
        metadata = self.get_metadata(path)
        return metadata.size if metadata else None

    def get_mimetype(self, path: str) -> Optional[str]:
        metadata = self.get_metadata(path)
        return metadata.mimetype if metadata else None

    def get_timestamp(self, path: str) -> Optional[int]:
        metadata = self.get_metadata(path)
        return metadata.timestamp if metadata else None

    def get_visibility(self, path: str) -> Optional[VisibilityResult]:
        return VisibilityResult(path=path)

    def get_url(self, path: str) -> str:
        """Public CDN URL of a path."""
        return self._media_url + path

    def _transfer(self, path: str, new_path: str) -> TransferOutcome:
        source = self.read(path)
        if source is None:
            return TransferOutcome.READ_FAILED

        if self.write(new_path, source.contents) is None:
            return TransferOutcome.WRITE_FAILED

        return TransferOutcome.COPIED


def _remaining_length(stream: BinaryIO) -> int:
    """Bytes between the current position and the end of a seekable stream."""
    position = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(position)
    return end - position
