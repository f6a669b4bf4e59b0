"""``requests`` auth hooks for the Looker API."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import requests

from looker_provisioner.core.errors import APIError, TransportError

if TYPE_CHECKING:
    from requests import PreparedRequest

logger = logging.getLogger(__name__)

# Refresh this many seconds before the server-side expiry.
_EXPIRY_MARGIN = 30.0


class TokenAuth(requests.auth.AuthBase):
    """Attach a pre-issued access token."""

    def __init__(self, access_token: str) -> None:
        self._access_token = access_token

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        r.headers["Authorization"] = f"token {self._access_token}"
        return r


class LoginAuth(requests.auth.AuthBase):
    """Exchange API3 client credentials for an access token.

    Logs in lazily on the first request and again once the token is about to
    expire.
    """

    def __init__(
        self,
        login_url: str,
        client_id: str,
        client_secret: str,
        *,
        timeout: float,
        verify_ssl: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        self._login_url = login_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._session = session if session is not None else requests.Session()
        self._access_token: str | None = None
        self._expires_at = 0.0

    def _login(self) -> None:
        try:
            resp = self._session.post(
                self._login_url,
                data={"client_id": self._client_id, "client_secret": self._client_secret},
                timeout=self._timeout,
                verify=self._verify_ssl,
            )
        except requests.RequestException as exc:
            raise TransportError("POST", self._login_url, str(exc)) from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = resp.text

        if not 200 <= resp.status_code < 300:
            raise APIError.from_payload(
                method="POST", url=self._login_url, status_code=resp.status_code, payload=payload
            )
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise APIError(
                method="POST",
                url=self._login_url,
                status_code=resp.status_code,
                message="login response did not contain an access_token",
                payload=payload,
            )

        self._access_token = payload["access_token"]
        expires_in = float(payload.get("expires_in") or 3600)
        self._expires_at = time.monotonic() + max(expires_in - _EXPIRY_MARGIN, 0.0)
        logger.debug("Logged in to %s (token valid for %.0fs)", self._login_url, expires_in)

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        if self._access_token is None or time.monotonic() >= self._expires_at:
            self._login()
        r.headers["Authorization"] = f"token {self._access_token}"
        return r
