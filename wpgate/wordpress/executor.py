"""
Request execution against the WordPress REST API.

Every call made by the resource client goes through ``RequestExecutor``:

1. Resolve the target against the versioned API base (absolute URLs pass through)
2. Attach the Basic ``Authorization`` header (always, last)
3. Send a JSON body, or a multipart form for media uploads
4. Normalize failures into ``TransportFailure`` / ``UpstreamApiError``
5. Decode the JSON body; list calls also read the pagination headers

There is exactly one attempt per call. Retrying is left to the caller.
"""

import json
import logging
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from urllib.parse import unquote, urlparse

import httpx

from wpgate.framework.errors import TransportFailure, UpstreamApiError, ValidationFailure
from wpgate.wordpress.auth import Credential

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOTAL_HEADER = "x-wp-total"
TOTAL_PAGES_HEADER = "x-wp-totalpages"
ALLOWED_METHODS = frozenset({"GET", "POST", "DELETE"})
DEFAULT_UPLOAD_NAME = "uploaded-file"


# =============================================================================
# Request / Response Types
# =============================================================================


@dataclass(frozen=True)
class MediaUpload:
    """Binary payload sent as the ``file`` field of a multipart form."""

    content: bytes = field(repr=False)
    filename: str
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class RequestSpec:
    """One REST call. Built per call, never retained.

    Attributes:
        target: Path relative to the API base (``/posts/1``) or an absolute URL
        method: GET, POST or DELETE
        json: JSON body (ignored when ``upload`` is set)
        upload: Multipart payload for media creation
        form: Extra text fields sent alongside ``upload``
        headers: Extra headers; they cannot replace Authorization
    """

    target: str
    method: str = "GET"
    json: Any = None
    upload: MediaUpload | None = None
    form: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in ALLOWED_METHODS:
            msg = f"method must be one of {sorted(ALLOWED_METHODS)}, got '{self.method}'"
            raise ValueError(msg)
        object.__setattr__(self, "method", method)


@dataclass(frozen=True)
class ListResult(Generic[T]):
    """A page of items plus the totals WordPress reported.

    ``total`` and ``total_pages`` are 0 when the headers were absent or
    malformed; callers treat 0 as "unknown".
    """

    items: list[T]
    total: int = 0
    total_pages: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def first(self) -> T | None:
        return self.items[0] if self.items else None


# =============================================================================
# Paginator
# =============================================================================


def parse_total_header(value: str | None) -> int:
    """Parse a pagination header; missing or malformed values are 0."""
    if value is None:
        return 0
    value = value.strip()
    # int() would also take "4_2" and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        return 0
    return int(value)


def paginate(body: Any, headers: Mapping[str, str]) -> ListResult[Any]:
    """Pair a decoded list body with the x-wp-total / x-wp-totalpages headers."""
    items = body if isinstance(body, list) else []
    return ListResult(
        items=items,
        total=parse_total_header(headers.get(TOTAL_HEADER)),
        total_pages=parse_total_header(headers.get(TOTAL_PAGES_HEADER)),
    )


# =============================================================================
# Error Normalization
# =============================================================================


def extract_error_message(body: str) -> str:
    """Pick the most useful message from an error body.

    Priority: JSON ``message`` -> JSON ``code`` -> raw body text.
    """
    try:
        parsed = json.loads(body)
    except ValueError:
        return body

    if isinstance(parsed, dict):
        for key in ("message", "code"):
            value = parsed.get(key)
            if value:
                return str(value)
    return body


def normalize_error(response: httpx.Response) -> UpstreamApiError:
    """Build the error for a non-2xx response. The body must already be read."""
    body = response.text
    return UpstreamApiError(response.status_code, extract_error_message(body), body=body)


# =============================================================================
# Executor
# =============================================================================


class RequestExecutor:
    """Issues authenticated calls and decodes WordPress responses.

    Holds no mutable state between calls beyond the HTTP connection pool.
    """

    def __init__(
        self,
        api_base: str,
        credential: Credential,
        *,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            api_base: Versioned REST base, e.g. https://example.com/wp-json/wp/v2
            credential: Identity used for every call
            timeout_seconds: Per-request timeout
            transport: Optional httpx transport (tests use httpx.MockTransport)
            client: Optional pre-built client; the executor then does not own it
        """
        self.api_base = api_base.rstrip("/")
        self._authorization = credential.authorization_header()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
            follow_redirects=True,
        )

    def resolve(self, target: str) -> str:
        """Return the absolute URL for a target."""
        if target.startswith("http"):
            return target
        return f"{self.api_base}{target}"

    def _build_headers(self, spec: RequestSpec) -> httpx.Headers:
        headers = httpx.Headers()
        if spec.upload is None:
            headers["Content-Type"] = "application/json"
        headers.update(spec.headers)
        if spec.upload is not None and "content-type" in headers:
            # httpx must write the multipart boundary itself
            del headers["content-type"]
        headers["Authorization"] = self._authorization
        return headers

    async def _send(self, spec: RequestSpec) -> httpx.Response:
        url = self.resolve(spec.target)
        kwargs: dict[str, Any] = {"headers": self._build_headers(spec)}

        if spec.upload is not None:
            upload = spec.upload
            kwargs["files"] = {"file": (upload.filename, upload.content, upload.content_type)}
            if spec.form:
                kwargs["data"] = dict(spec.form)
        elif spec.json is not None:
            kwargs["content"] = json.dumps(spec.json).encode("utf-8")

        logger.debug("WordPress request: %s %s", spec.method, url)
        try:
            response = await self._client.request(spec.method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("WordPress request failed without response: %s %s (%s)", spec.method, url, e)
            raise TransportFailure(url, e) from e

        if not response.is_success:
            error = normalize_error(response)
            logger.info(
                "WordPress API error on %s %s: %s %s",
                spec.method,
                url,
                error.upstream_status,
                error.upstream_message,
            )
            raise error

        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            msg = f"response body is not valid JSON ({e})"
            raise UpstreamApiError(response.status_code, msg, body=response.text) from e

    async def execute(self, spec: RequestSpec) -> Any:
        """Run a call and return the decoded JSON body."""
        response = await self._send(spec)
        return self._decode(response)

    async def execute_with_metadata(self, spec: RequestSpec) -> ListResult[Any]:
        """Run a list call and return items with pagination totals."""
        response = await self._send(spec)
        return paginate(self._decode(response), response.headers)

    async def download(self, url: str) -> MediaUpload:
        """Fetch a remote file (no WordPress credentials attached)."""
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            msg = f"URL must use http or https, got '{url}'"
            raise ValidationFailure(msg, field="url")

        try:
            response = await self._client.get(url)
        except httpx.TransportError as e:
            raise TransportFailure(url, e) from e

        if not response.is_success:
            msg = f"Could not fetch file from URL. Status: {response.status_code}"
            raise ValidationFailure(msg, field="url")

        filename = posixpath.basename(unquote(parsed.path)) or DEFAULT_UPLOAD_NAME
        content_type = response.headers.get("content-type") or "application/octet-stream"
        return MediaUpload(
            content=response.content,
            filename=filename,
            content_type=content_type.split(";")[0].strip(),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RequestExecutor":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
