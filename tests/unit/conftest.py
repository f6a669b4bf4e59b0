"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from looker_provisioner.config import load
from looker_provisioner.core.client import LookerClient
from looker_provisioner.core.provider import LookerProvider
from looker_provisioner.plugin.handlers import PluginContext

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from looker_provisioner.config.schema import Config

BASE_URL = "https://looker.test/api/"

_LOOKER_ENV_VARS = (
    "LOOKER_BASE_URL",
    "LOOKER_CLIENT_ID",
    "LOOKER_CLIENT_SECRET",
    "LOOKER_ACCESS_TOKEN",
    "LOOKER_TIMEOUT",
    "LOOKER_VERIFY_SSL",
    "LOOKER_LOG",
)


@pytest.fixture(autouse=True)
def _clean_looker_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove LOOKER_* env vars so unit tests don't leak host config."""
    for var in _LOOKER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make


def build_response(
    status: int = 200,
    body: Any = None,
    *,
    text: str | None = None,
    next_url: str | None = None,
    url: str = f"{BASE_URL}4.0/test",
) -> requests.Response:
    """Build a real, fully-read ``requests.Response``."""
    resp = requests.Response()
    resp.status_code = status
    if text is not None:
        content = text.encode()
    elif body is None:
        content = b""
    else:
        content = json.dumps(body).encode()
    resp._content = content
    resp._content_consumed = True
    resp.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
    if next_url is not None:
        resp.headers["Link"] = f'<{next_url}>; rel="next"'
    resp.url = url
    return resp


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    return build_response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session: MagicMock) -> LookerClient:
    return LookerClient(BASE_URL, session=session)


@pytest.fixture
def provider(client: LookerClient) -> LookerProvider:
    return LookerProvider.from_client(client)


@pytest.fixture
def ctx(provider: LookerProvider) -> PluginContext:
    return PluginContext(provider=provider)


@pytest.fixture
def sent(session: MagicMock) -> Callable[[], list[tuple[str, str]]]:
    """``(method, url)`` of every request sent through the mocked session."""

    def _sent() -> list[tuple[str, str]]:
        return [(c.args[0], c.args[1]) for c in session.request.call_args_list]

    return _sent
