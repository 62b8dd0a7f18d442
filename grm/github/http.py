"""HTTP transport for the GitHub REST API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- UrllibHttpClient: Real implementation using urllib
- MockHttpClient: Scripted implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from grm.core.result import Err, Ok, Result
from grm.core.structured import as_str_dict, get_str
from grm.github.timeouts import HTTP_TIMEOUT_SECONDS

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RecordedRequest",
    "UrllibHttpClient",
]

JsonBody = dict[str, object]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: GitHub's error ``message`` when the body carries one, else the reason
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON-over-HTTP requests."""

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: JsonBody | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and decode the JSON response.

        Returns:
            Ok with the decoded JSON (None for an empty body), or Err with HttpError
        """
        ...


def _error_message(raw: bytes, fallback: str) -> str:
    try:
        obj: object = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback
    data = as_str_dict(obj)
    if data is None:
        return fallback
    return get_str(data, "message") or fallback


class UrllibHttpClient:
    """Real HTTP client using urllib.

    Handles HTTPS with system certificates, JSON encoding of request bodies and
    decoding of both success and error payloads.
    """

    def __init__(self, timeout: float = HTTP_TIMEOUT_SECONDS, user_agent: str = "grm") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: JsonBody | None = None,
    ) -> Result[object, HttpError]:
        all_headers = {"User-Agent": self.user_agent, **(headers or {})}
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            all_headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_message(e.read(), e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw:
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    method: str
    url: str
    body: JsonBody | None

    @property
    def path(self) -> str:
        return urllib.parse.urlsplit(self.url).path


def _empty_calls() -> list[RecordedRequest]:
    return []


def _empty_routes() -> dict[tuple[str, str], list[object | HttpError]]:
    return {}


@dataclass
class MockHttpClient:
    """Scripted HTTP client for testing.

    Responses are registered per method and URL path. Registering several
    responses for the same route serves them in order (the last one repeats),
    which covers pagination and repeated calls.

    Usage:
        http = MockHttpClient(base_url="https://api.github.com")
        http.set_response("GET", "/repos/acme/web", {"name": "web"})
        http.set_response("POST", "/repos/acme/web/git/refs", HttpError(..., 422, "Reference already exists"))
    """

    base_url: str = "https://api.github.com"
    calls: list[RecordedRequest] = field(default_factory=_empty_calls)
    _routes: dict[tuple[str, str], list[object | HttpError]] = field(default_factory=_empty_routes)

    def set_response(self, method: str, path: str, *responses: object | HttpError) -> None:
        self._routes[(method.upper(), path)] = list(responses)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: JsonBody | None = None,
    ) -> Result[object, HttpError]:
        del headers
        recorded = RecordedRequest(method=method.upper(), url=url, body=body)
        self.calls.append(recorded)

        queue = self._routes.get((recorded.method, recorded.path))
        if not queue:
            return Err(HttpError(url=url, status=404, message="Not Found"))

        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    # Test helpers

    def requests_to(self, method: str, path: str) -> list[RecordedRequest]:
        return [c for c in self.calls if c.method == method.upper() and c.path == path]

    @property
    def routes_called(self) -> list[tuple[str, str]]:
        return [(c.method, c.path) for c in self.calls]
