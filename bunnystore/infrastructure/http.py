"""
BUNNYSTORE - HTTP Client Abstraction

Provides abstraction layer for HTTP operations.
This allows mocking in tests and centralizes HTTP logic.
"""

import io
import json
from email.utils import formatdate
from typing import Protocol, Dict, Any, Optional, Union, BinaryIO
from urllib.parse import urlsplit
import requests
from requests import Response
from requests.structures import CaseInsensitiveDict

Body = Union[bytes, BinaryIO, None]


class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: float = 30,
        stream: bool = False,
    ) -> Response:
        """Perform HTTP GET request."""
        ...

    def put(
        self,
        url: str,
        data: Body = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ) -> Response:
        """Perform HTTP PUT request."""
        ...

    def delete(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ) -> Response:
        """Perform HTTP DELETE request."""
        ...


class RequestsHttpClient:
    """Real HTTP client using requests library."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session or requests.Session()

    def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: float = 30,
        stream: bool = False,
    ) -> Response:
        return self._session.get(
            url,
            headers=headers or {},
            params=params or {},
            timeout=timeout,
            stream=stream,
        )

    def put(
        self,
        url: str,
        data: Body = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ) -> Response:
        return self._session.put(
            url, data=data, headers=headers or {}, timeout=timeout, allow_redirects=False
        )

    def delete(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ) -> Response:
        return self._session.delete(url, headers=headers or {}, timeout=timeout)

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()


class MockHttpClient:
    """
    Mock HTTP client for testing.

    Emulates a storage zone in memory: objects are keyed by URL path
    relative to ``base_url``. PUT answers 201, GET and DELETE answer 200
    or 404, and a GET on a path ending in "/" returns a JSON listing.
    Specific calls can be forced to fail with ``fail()``.
    """

    def __init__(self, base_url: str = "http://storage.test/zone/", objects: Optional[Dict[str, bytes]] = None):
        self._base_path = urlsplit(base_url).path
        self._objects: Dict[str, bytes] = dict(objects or {})
        self._mtimes: Dict[str, float] = {key: 0.0 for key in self._objects}
        self._failures: Dict[tuple[str, str], Union[int, Exception]] = {}
        self._call_history: list[tuple[str, str, Dict, Dict]] = []
        self._clock = 1_700_000_000.0

    def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: float = 30,
        stream: bool = False,
    ) -> Response:
        key = self._record("GET", url, headers, params)
        forced = self._forced("GET", key)
        if forced is not None:
            return forced

        if key.endswith("/") or key == "":
            return self._listing(key)

        if key not in self._objects:
            return self._response(404)

        body = self._objects[key]
        response = self._response(200, body)
        response.headers["Content-Length"] = str(len(body))
        response.headers["Last-Modified"] = formatdate(self._mtimes[key], usegmt=True)
        response.headers["Content-Type"] = "application/octet-stream"
        return response

    def put(
        self,
        url: str,
        data: Body = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ) -> Response:
        key = self._record("PUT", url, headers, {})
        # The body is consumed like a real upload would, even on failure
        body = data.read() if hasattr(data, "read") else (data or b"")
        forced = self._forced("PUT", key)
        if forced is not None:
            return forced

        self._clock += 1
        self._objects[key] = bytes(body)
        self._mtimes[key] = self._clock
        return self._response(201)

    def delete(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ) -> Response:
        key = self._record("DELETE", url, headers, {})
        forced = self._forced("DELETE", key)
        if forced is not None:
            return forced

        prefix = key.rstrip("/") + "/"
        doomed = [k for k in self._objects if k == key or k.startswith(prefix)]
        if not doomed:
            return self._response(404)
        for k in doomed:
            del self._objects[k]
            del self._mtimes[k]
        return self._response(200)

    def fail(self, method: str, path: str, outcome: Union[int, Exception]) -> None:
        """Answer ``method`` on ``path`` with a fixed status code or raise ``outcome``."""
        self._failures[(method.upper(), path)] = outcome

    def clear_failures(self) -> None:
        """Remove all forced failures."""
        self._failures.clear()

    def objects(self) -> Dict[str, bytes]:
        """Snapshot of stored objects keyed by path."""
        return dict(self._objects)

    def get_call_history(self) -> list[tuple[str, str, Dict, Dict]]:
        """Get history of HTTP calls for testing as (method, url, headers, params)."""
        return self._call_history

    def calls(self, method: str) -> list[tuple[str, str, Dict, Dict]]:
        """Calls recorded for one HTTP method."""
        return [call for call in self._call_history if call[0] == method.upper()]

    def _record(self, method: str, url: str, headers: Optional[Dict], params: Optional[Dict]) -> str:
        self._call_history.append((method, url, headers or {}, params or {}))
        path = urlsplit(url).path
        if path.startswith(self._base_path):
            path = path[len(self._base_path):]
        return path

    def _forced(self, method: str, key: str) -> Optional[Response]:
        outcome = self._failures.get((method, key))
        if outcome is None:
            return None
        if isinstance(outcome, Exception):
            raise outcome
        return self._response(outcome)

    def _listing(self, key: str) -> Response:
        prefix = key.lstrip("/")
        names: Dict[str, bool] = {}
        for path in self._objects:
            relative = path.lstrip("/")
            if not relative.startswith(prefix):
                continue
            head, _, tail = relative[len(prefix):].partition("/")
            if head:
                names[head] = names.get(head, False) or bool(tail)
        if not names and prefix:
            return self._response(404)

        entries = [{"ObjectName": name, "IsDirectory": is_dir} for name, is_dir in names.items()]
        response = self._response(200, json.dumps(entries).encode())
        response.headers["Content-Type"] = "application/json"
        return response

    @staticmethod
    def _response(status_code: int, body: bytes = b"") -> Response:
        response = Response()
        response.status_code = status_code
        response.headers = CaseInsensitiveDict()
        response.raw = io.BytesIO(body)
        return response
