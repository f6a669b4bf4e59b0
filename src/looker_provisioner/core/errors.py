"""Client error types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class LookerError(Exception):
    """Base exception for all client errors."""


class TransportError(LookerError):
    """The request never produced an HTTP response (timeout, DNS, refused connection)."""

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(f"{method} {url} failed: {message}")
        self.method = method
        self.url = url


class RequestCancelled(LookerError):
    """The caller's cancellation token fired before or during a request."""

    def __init__(self, method: str, url: str) -> None:
        super().__init__(f"{method} {url} canceled")
        self.method = method
        self.url = url


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single field-level complaint from an API error payload."""

    field: str | None = None
    code: str | None = None
    message: str | None = None

    def __str__(self) -> str:
        parts = [p for p in (self.field, self.code, self.message) if p]
        return ": ".join(parts)


class APIError(LookerError):
    """The API answered with a non-2xx status.

    ``payload`` holds the decoded body as-is (``None`` when it was not JSON).
    """

    def __init__(
        self,
        *,
        method: str,
        url: str,
        status_code: int,
        message: str,
        errors: list[FieldError] | None = None,
        documentation_url: str | None = None,
        payload: Any = None,
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        self.documentation_url = documentation_url
        self.payload = payload

        msg = f"{method} {url}: {status_code} {message}"
        if self.errors:
            msg += "\n" + "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(msg)

    @classmethod
    def from_payload(cls, *, method: str, url: str, status_code: int, payload: Any) -> APIError:
        """Build the right subclass from a decoded error body."""
        message = ""
        errors: list[FieldError] = []
        documentation_url = None
        if isinstance(payload, dict):
            message = str(payload.get("message") or "")
            documentation_url = payload.get("documentation_url")
            for e in payload.get("errors") or []:
                if isinstance(e, dict):
                    errors.append(
                        FieldError(field=e.get("field"), code=e.get("code"), message=e.get("message"))
                    )
        elif isinstance(payload, str):
            message = payload.strip()

        err_cls = NotFoundError if status_code == 404 else cls
        return err_cls(
            method=method,
            url=url,
            status_code=status_code,
            message=message or "request failed",
            errors=errors,
            documentation_url=documentation_url,
            payload=payload,
        )


class NotFoundError(APIError):
    """404 from the API. Resource readers treat it as "absent", not a failure."""


class DecodeError(LookerError):
    """A 2xx body did not match the typed target."""

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(f"{method} {url}: could not decode response: {message}")
        self.method = method
        self.url = url
