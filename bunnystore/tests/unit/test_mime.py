"""
Unit tests for MIME type guessing.
"""

import pytest
from bunnystore.storage.mime import guess_mimetype


class TestGuessMimetype:
    """Tests for guess_mimetype."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("media/a.png", "image/png"),
            ("media/a.jpg", "image/jpeg"),
            ("docs/manual.pdf", "application/pdf"),
            ("styles/site.css", "text/css"),
        ],
    )
    def test_extension_wins(self, path, expected):
        assert guess_mimetype(path, b"irrelevant") == expected

    @pytest.mark.parametrize(
        "contents,expected",
        [
            (b"\x89PNG\r\n\x1a\n....", "image/png"),
            (b"\xff\xd8\xff\xe0....", "image/jpeg"),
            (b"GIF89a....", "image/gif"),
            (b"%PDF-1.7", "application/pdf"),
            (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
            (b"just words", "text/plain"),
            (b"\xff\xfe\x00\x81binary", "application/octet-stream"),
        ],
    )
    def test_content_sniffing_without_extension(self, contents, expected):
        assert guess_mimetype("media/blob", contents) == expected

    def test_no_extension_and_no_content(self):
        assert guess_mimetype("media/blob") == "text/plain"
        assert guess_mimetype("media/blob", b"") == "text/plain"
