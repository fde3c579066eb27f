"""
BUNNYSTORE - MIME Type Guessing

Best-effort MIME detection for written content: by file extension first,
then by leading magic bytes, then text versus binary.
"""

import mimetypes
from typing import Optional

# Leading byte signatures of common media formats
_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b", "application/gzip"),
    (b"ID3", "audio/mpeg"),
    (b"OggS", "audio/ogg"),
    (b"<svg", "image/svg+xml"),
)


def guess_mimetype(path: str, contents: Optional[bytes] = None) -> str:
    """
    Guess the MIME type of an object.

    Args:
        path: Object path; its extension is checked first
        contents: Optional object bytes for content sniffing

    Returns:
        MIME type string, never empty
    """
    by_name, _ = mimetypes.guess_type(path, strict=False)
    if by_name:
        return by_name

    if contents:
        return _sniff(contents)

    return "text/plain"


def _sniff(contents: bytes) -> str:
    head = contents[:32]
    for signature, mimetype in _SIGNATURES:
        if head.startswith(signature):
            return mimetype

    if head[:4] == b"RIFF" and contents[8:12] == b"WEBP":
        return "image/webp"

    try:
        contents.decode("utf-8")
    except UnicodeDecodeError:
        return "application/octet-stream"
    return "text/plain"
