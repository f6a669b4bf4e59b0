"""HTTP client for the Looker REST API.

One ``LookerClient`` is built per provider and shared by every handler. It
owns request construction, typed JSON encoding/decoding, pagination and
error classification; it keeps no per-call state.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import cache
from typing import TYPE_CHECKING, Any, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from looker_provisioner import __version__
from looker_provisioner.core.errors import (
    APIError,
    DecodeError,
    RequestCancelled,
    TransportError,
)
from looker_provisioner.resources.markers import to_wire

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_VERSION = "4.0"
DEFAULT_TIMEOUT = 60.0
_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ListOptions:
    """Query options for list endpoints.

    ``limit`` switches on offset paging: pages are requested until one comes
    back shorter than ``limit``. Without it, only ``Link: rel="next"``
    headers are followed.
    """

    limit: int | None = None
    offset: int = 0
    fields: str | None = None
    sorts: str | None = None
    filters: Mapping[str, Any] = field(default_factory=dict)

    def to_params(self, offset: int | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {k: v for k, v in self.filters.items() if v is not None}
        if self.fields:
            params["fields"] = self.fields
        if self.sorts:
            params["sorts"] = self.sorts
        if self.limit is not None:
            params["limit"] = self.limit
            params["offset"] = self.offset if offset is None else offset
        return params


@dataclass(frozen=True)
class Response:
    """Decoded HTTP response envelope."""

    method: str
    url: str
    status_code: int
    headers: Mapping[str, str]
    body: Any = None
    next_url: str | None = None


@cache
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


def _check_cancel(cancel: threading.Event | None, method: str, url: str) -> None:
    if cancel is not None and cancel.is_set():
        raise RequestCancelled(method, url)


def _encode(body: Any) -> Any:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        return to_wire(body)
    return body


def _parse(content: bytes) -> Any:
    """JSON-decode a body; empty bodies become ``None``, non-JSON stays text."""
    if not content.strip():
        return None
    try:
        return json.loads(content)
    except ValueError:
        return content.decode("utf-8", errors="replace")


class LookerClient:
    """Synchronous client bound to one API base URL.

    Args:
        base_url: API root, e.g. ``https://acme.cloud.looker.com/api/``.
            Resource paths (``4.0/folders``) are resolved against it.
        auth: A ``requests`` auth hook attaching credentials to every request.
        timeout: Per-request timeout in seconds (connect and read).
        verify_ssl: Verify TLS certificates.
        session: Injected ``requests.Session`` (tests, connection reuse).
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: requests.auth.AuthBase | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") + "/"
        self._auth = auth
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._session = session if session is not None else requests.Session()
        self._headers = {
            "Accept": "application/json",
            "User-Agent": f"looker-provisioner/{__version__}",
        }

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def url_for(self, path: str) -> str:
        """Resolve a resource path (or pass through an absolute pagination URL)."""
        if path.startswith(("http://", "https://")):
            return path
        return self._base_url + path.lstrip("/")

    # ── Envelope level ─────────────────────────────────────────────

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        cancel: threading.Event | None = None,
    ) -> Response:
        """Send one request and return the decoded envelope.

        Raises:
            RequestCancelled: *cancel* was set before or while the request ran.
            TransportError: No HTTP response could be obtained.
            APIError: The response status was not 2xx (``NotFoundError`` for 404).
        """
        url = self.url_for(path)
        _check_cancel(cancel, method, url)

        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=_encode(body),
                headers=self._headers,
                auth=self._auth,
                timeout=self._timeout,
                verify=self._verify_ssl,
                stream=cancel is not None,
            )
        except requests.RequestException as exc:
            raise TransportError(method, url, str(exc)) from exc

        try:
            content = self._read_content(resp, method, url, cancel)
        finally:
            resp.close()

        logger.debug("%s %s -> %d", method, url, resp.status_code)
        payload = _parse(content)

        if not 200 <= resp.status_code < 300:
            raise APIError.from_payload(
                method=method, url=url, status_code=resp.status_code, payload=payload
            )

        next_link = resp.links.get("next") or {}
        return Response(
            method=method,
            url=url,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=payload,
            next_url=next_link.get("url"),
        )

    @staticmethod
    def _read_content(
        resp: requests.Response,
        method: str,
        url: str,
        cancel: threading.Event | None,
    ) -> bytes:
        try:
            if cancel is None:
                return resp.content
            chunks: list[bytes] = []
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                _check_cancel(cancel, method, url)
                chunks.append(chunk)
            return b"".join(chunks)
        except requests.RequestException as exc:
            raise TransportError(method, url, str(exc)) from exc

    @staticmethod
    def _decode(resp: Response, model: Any) -> Any:
        if resp.body is not None and not isinstance(resp.body, (dict, list)):
            raise DecodeError(resp.method, resp.url, "expected a JSON document")
        try:
            return _adapter(model).validate_python(resp.body)
        except PydanticValidationError as exc:
            raise DecodeError(resp.method, resp.url, str(exc)) from exc

    # ── Typed operations ───────────────────────────────────────────

    def get(
        self,
        path: str,
        model: type[T],
        *,
        params: Mapping[str, Any] | None = None,
        cancel: threading.Event | None = None,
    ) -> T:
        resp = self.request("GET", path, params=params, cancel=cancel)
        return self._decode(resp, model)

    def create(
        self,
        path: str,
        body: Any,
        model: type[T],
        *,
        cancel: threading.Event | None = None,
    ) -> T:
        resp = self.request("POST", path, body=body, cancel=cancel)
        return self._decode(resp, model)

    def update(
        self,
        path: str,
        body: Any,
        model: type[T],
        *,
        cancel: threading.Event | None = None,
    ) -> T:
        """PATCH *body*; unset fields are omitted so remote values are left alone."""
        resp = self.request("PATCH", path, body=body, cancel=cancel)
        return self._decode(resp, model)

    def delete(self, path: str, *, cancel: threading.Event | None = None) -> Response:
        """DELETE *path*; any 2xx (``204 No Content`` included) is success."""
        return self.request("DELETE", path, cancel=cancel)

    def iter_list(
        self,
        path: str,
        model: type[T],
        options: ListOptions | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> Iterator[T]:
        """Yield items across all pages, in server order.

        The iterator is lazy and single-pass: pages are requested as the
        caller consumes items.
        """
        options = options or ListOptions()
        page_model = list[model]  # type: ignore[valid-type]
        target: str = path
        params: dict[str, Any] | None = options.to_params()
        offset = options.offset
        seen: set[str] = set()

        while True:
            resp = self.request("GET", target, params=params, cancel=cancel)
            items = self._decode(resp, page_model)
            yield from items

            if resp.next_url:
                if resp.next_url in seen:
                    logger.warning("Pagination loop detected at %s; stopping", resp.next_url)
                    return
                seen.add(resp.next_url)
                target, params = resp.next_url, None
            elif options.limit and len(items) == options.limit:
                offset += options.limit
                params = options.to_params(offset=offset)
            else:
                return

    def list(
        self,
        path: str,
        model: type[T],
        options: ListOptions | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> list[T]:
        return list(self.iter_list(path, model, options, cancel=cancel))
