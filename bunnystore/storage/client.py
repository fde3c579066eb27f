"""
BUNNYSTORE - Storage Zone Client

Maps object operations onto the Bunny storage HTTP API.

Authentication differs per call: uploads, deletes and listings send the
access key as a header, while content reads and metadata probes pass it
as the ``AccessKey`` query parameter.
"""

import io
import logging
from email.utils import parsedate_to_datetime
from typing import BinaryIO, List, Optional

from requests import RequestException, Response

from bunnystore.core.errors import (
    DeleteError,
    MetadataError,
    ReadError,
    TransportError,
    WriteError,
)
from bunnystore.core.types import ObjectMetadata, RawEntry
from bunnystore.infrastructure.http import HttpClient

logger = logging.getLogger(__name__)


class RemoteObjectStream(io.RawIOBase):
    """Readable binary stream over a streamed HTTP response."""

    def __init__(self, response: Response, chunk_size: int = 64 * 1024):
        self._response = response
        self._chunks = response.iter_content(chunk_size=chunk_size)
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if not self._buffer:
            self._buffer = next(self._chunks, b"")
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class BunnyStorageClient:
    """Stateless client for a single storage zone."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        http_client: HttpClient,
        request_timeout: float = 30.0,
        upload_timeout: float = 600.0,
    ):
        """
        Initialize storage client.

        Args:
            api_url: Storage API URL including the zone, e.g. https://storage.bunnycdn.com/zone/
            api_key: Storage zone access key
            http_client: HTTP client for API requests
            request_timeout: Timeout for GET and DELETE requests in seconds
            upload_timeout: Timeout for PUT requests in seconds
        """
        self._api_url = api_url
        self._api_key = api_key
        self._http = http_client
        self._request_timeout = request_timeout
        self._upload_timeout = upload_timeout

    def url_for(self, path: str) -> str:
        """Absolute API URL of a path."""
        return self._api_url + path

    def put_object(self, path: str, stream: BinaryIO, length: int) -> None:
        """
        Upload an object.

        Args:
            path: Object path
            stream: Readable binary stream positioned at the first byte to send
            length: Number of bytes to send

        Raises:
            WriteError: If the request fails, the body cannot be read or the status is not 201
        """
        headers = {
            "accesskey": self._api_key,
            "Content-Length": str(length),
        }
        # requests frames an empty file-like body as chunked
        body = stream if length > 0 else b""
        try:
            response = self._http.put(
                self.url_for(path), data=body, headers=headers, timeout=self._upload_timeout
            )
        except (RequestException, OSError) as e:
            raise WriteError(f"Upload of {path} failed: {e}") from e

        try:
            if response.status_code != 201:
                raise WriteError(
                    f"Upload of {path} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
        finally:
            response.close()

        logger.debug(f"Uploaded {path} ({length} bytes)")

    def delete_object(self, path: str) -> None:
        """
        Delete an object or directory.

        Raises:
            DeleteError: If there is no response or the status is not 200
        """
        headers = {
            "Content-Type": "application/json",
            "AccessKey": self._api_key,
        }
        try:
            response = self._http.delete(self.url_for(path), headers=headers, timeout=self._request_timeout)
        except RequestException as e:
            raise DeleteError(f"Delete of {path} failed: {e}") from e

        try:
            if response.status_code != 200:
                raise DeleteError(
                    f"Delete of {path} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
        finally:
            response.close()

        logger.debug(f"Deleted {path}")

    def fetch_object_stream(self, path: str) -> RemoteObjectStream:
        """
        Open an object for reading.

        Returns:
            Stream over the object body; closing it releases the connection

        Raises:
            ReadError: If the request fails or the status is not 200
        """
        try:
            response = self._get_with_query_key(path)
        except RequestException as e:
            raise ReadError(f"Read of {path} failed: {e}") from e

        if response.status_code != 200:
            response.close()
            raise ReadError(
                f"Read of {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return RemoteObjectStream(response)

    def probe_metadata(self, path: str) -> ObjectMetadata:
        """
        Fetch object metadata from response headers without reading the body.

        Raises:
            MetadataError: If the request fails or the status is not 200
        """
        try:
            response = self._get_with_query_key(path)
        except RequestException as e:
            raise MetadataError(f"Metadata probe of {path} failed: {e}") from e

        try:
            if response.status_code != 200:
                raise MetadataError(
                    f"Metadata probe of {path} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            headers = response.headers
            return ObjectMetadata(
                path=path,
                size=_parse_int(headers.get("Content-Length")),
                timestamp=_parse_http_date(headers.get("Last-Modified")),
                mimetype=headers.get("Content-Type"),
            )
        finally:
            response.close()

    def list_directory(self, path: str) -> List[RawEntry]:
        """
        List the direct children of a directory.

        Returns:
            Decoded entries with at least ObjectName and IsDirectory

        Raises:
            TransportError: If the request fails, the status is not 200 or the body is not a JSON array
        """
        headers = {
            "accesskey": self._api_key,
            "Accept": "application/json",
        }
        try:
            response = self._http.get(
                self.url_for(path) + "/", headers=headers, timeout=self._request_timeout
            )
        except RequestException as e:
            raise TransportError(f"Listing of {path}/ failed: {e}") from e

        try:
            if response.status_code != 200:
                raise TransportError(
                    f"Listing of {path}/ returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            try:
                entries = response.json()
            except ValueError as e:
                raise TransportError(f"Listing of {path}/ returned malformed JSON: {e}") from e
        finally:
            response.close()

        if not isinstance(entries, list):
            raise TransportError(f"Listing of {path}/ did not return a JSON array")

        return [entry for entry in entries if isinstance(entry, dict) and "ObjectName" in entry]

    def _get_with_query_key(self, path: str) -> Response:
        return self._http.get(
            self.url_for(path),
            params={"AccessKey": self._api_key},
            timeout=self._request_timeout,
            stream=True,
        )


def _parse_int(value: Optional[str]) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parse_http_date(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        return int(parsedate_to_datetime(value).timestamp())
    except (TypeError, ValueError, IndexError, OverflowError, AttributeError):
        return 0
