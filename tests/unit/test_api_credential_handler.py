"""Tests for the ApiCredentialHandler."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from looker_provisioner.core.state import ResourceInstance
from looker_provisioner.plugin.api_credential_handler import ApiCredentialHandler, parse_import_id
from looker_provisioner.plugin.errors import PluginError, UpdateNotSupportedError
from looker_provisioner.resources.api_credential import ApiCredentialResource

if TYPE_CHECKING:
    from collections.abc import Callable

    import requests

    from looker_provisioner.plugin.handlers import PluginContext

BASE = "https://looker.test/api/"
CRED_PATH = f"{BASE}4.0/users/42/credentials_api3"


@pytest.fixture
def handler() -> ApiCredentialHandler:
    return ApiCredentialHandler()


def _remote(*, secret: bool = False) -> dict[str, object]:
    body: dict[str, object] = {
        "id": "9",
        "client_id": "abc123",
        "type": "api3",
        "is_disabled": False,
        "created_at": "2026-01-01T00:00:00Z",
        "url": f"{CRED_PATH}/9",
    }
    if secret:
        body["client_secret"] = "s3cr3t"
    return body


def _prior(**attrs: object) -> ResourceInstance:
    return ResourceInstance(
        resource_type="looker_api_credential",
        id="9",
        attributes={"id": "9", "user_id": 42, "client_secret": "s3cr3t", **attrs},
    )


class TestCreate:
    def test_captures_secret(
        self,
        ctx: PluginContext,
        handler: ApiCredentialHandler,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
    ) -> None:
        session.request.return_value = make_response(200, _remote(secret=True))

        attrs = handler.create(ctx, ApiCredentialResource(user_id=42))

        call = session.request.call_args
        assert call.args == ("POST", CRED_PATH)
        assert call.kwargs["json"] == {"type": "api3", "is_disabled": False}
        assert attrs == {
            "id": "9",
            "user_id": 42,
            "type": "api3",
            "is_disabled": False,
            "client_id": "abc123",
            "client_secret": "s3cr3t",
            "url": f"{CRED_PATH}/9",
        }

    def test_create_then_read_keeps_secret(
        self,
        ctx: PluginContext,
        handler: ApiCredentialHandler,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
    ) -> None:
        session.request.side_effect = [
            make_response(200, _remote(secret=True)),
            make_response(200, _remote()),
        ]

        created = handler.create(ctx, ApiCredentialResource(user_id=42))
        prior = ResourceInstance.from_attributes("looker_api_credential", created)
        read = handler.read(ctx, prior)

        assert read == created
        assert session.request.call_args.args == ("GET", f"{CRED_PATH}/9")


class TestRead:
    def test_returns_none_on_404(
        self,
        ctx: PluginContext,
        handler: ApiCredentialHandler,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
    ) -> None:
        session.request.return_value = make_response(404, {"message": "Not found"})

        assert handler.read(ctx, _prior()) is None


class TestUpdate:
    def test_rejected(self, ctx: PluginContext, handler: ApiCredentialHandler) -> None:
        desired = ApiCredentialResource(user_id=43)

        with pytest.raises(UpdateNotSupportedError, match="delete and recreate") as exc_info:
            handler.update(ctx, desired, _prior(type="api3", is_disabled=False))

        assert exc_info.value.fields == ["user_id"]


class TestDelete:
    def test_single_delete_and_clears_id(
        self,
        ctx: PluginContext,
        handler: ApiCredentialHandler,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
        sent: Callable[[], list[tuple[str, str]]],
    ) -> None:
        session.request.return_value = make_response(204)
        prior = _prior()

        handler.delete(ctx, prior)

        assert sent() == [("DELETE", f"{CRED_PATH}/9")]
        assert prior.id == ""


class TestImport:
    def test_parse_import_id(self) -> None:
        assert parse_import_id("42/9") == (42, "9")

    @pytest.mark.parametrize("bad", ["9", "abc/9", "42/", "/9", "42/9/1"])
    def test_parse_import_id_invalid(self, bad: str) -> None:
        with pytest.raises(PluginError, match="<user_id>/<credential_id>"):
            parse_import_id(bad)

    def test_import_reads_credential(
        self,
        ctx: PluginContext,
        handler: ApiCredentialHandler,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
    ) -> None:
        session.request.return_value = make_response(200, _remote())

        inst = handler.import_resource(ctx, "42/9")

        assert inst is not None
        assert inst.id == "9"
        assert inst.attributes["user_id"] == 42
        assert inst.attributes["client_secret"] is None
        assert session.request.call_args.args == ("GET", f"{CRED_PATH}/9")
