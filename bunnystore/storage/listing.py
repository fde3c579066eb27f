"""
BUNNYSTORE - Directory Listing

Turns raw storage zone listings into directory entries, optionally
descending into subdirectories.
"""

import logging
from typing import List

from bunnystore.core.errors import TransportError
from bunnystore.core.types import DirectoryEntry, ObjectType
from .client import BunnyStorageClient

logger = logging.getLogger(__name__)


def list_directory_contents(
    client: BunnyStorageClient, directory: str, recursive: bool = False
) -> List[DirectoryEntry]:
    """
    List a directory, depth-first when recursive.

    Each subdirectory's contents follow its own entry directly, before the
    parent's next sibling. The zone has no cycles, so there is no cycle check.
    A directory whose listing request fails contributes no entries.

    Args:
        client: Storage zone client
        directory: Directory path ("" for the zone root)
        recursive: Descend into subdirectories

    Returns:
        Entries in document order
    """
    try:
        raw_entries = client.list_directory(directory)
    except TransportError as e:
        logger.warning(f"Could not list {directory!r}: {e}")
        return []

    entries: List[DirectoryEntry] = []
    for raw in raw_entries:
        name = raw["ObjectName"]
        is_dir = bool(raw.get("IsDirectory"))
        path = f"{directory}/{name}"
        entries.append(
            DirectoryEntry(
                basename=name,
                path=path,
                type=ObjectType.DIR if is_dir else ObjectType.FILE,
            )
        )

        if recursive and is_dir:
            entries.extend(list_directory_contents(client, path, recursive=True))

    return entries
