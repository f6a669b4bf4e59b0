"""Handler for per-user API3 credentials."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict

from looker_provisioner.core.client import API_VERSION
from looker_provisioner.resources.markers import ReadOnly

if TYPE_CHECKING:
    import threading

    from looker_provisioner.core.client import LookerClient, Response

USERS_PATH = f"{API_VERSION}/users"


def credentials_path(user_id: int, credential_id: str | None = None) -> str:
    path = f"{USERS_PATH}/{user_id}/credentials_api3"
    return path if credential_id is None else f"{path}/{credential_id}"


class ApiCredential(BaseModel):
    """API3 credential. ``client_secret`` is only ever returned by the create call."""

    model_config = ConfigDict(extra="ignore")

    id: Annotated[str | None, ReadOnly()] = None
    client_id: Annotated[str | None, ReadOnly()] = None
    client_secret: Annotated[str | None, ReadOnly()] = None
    type: str | None = None
    is_disabled: bool | None = None
    created_at: Annotated[str | None, ReadOnly()] = None
    url: Annotated[str | None, ReadOnly()] = None


class ApiCredentialsHandler:
    """Calls for ``/users/{user_id}/credentials_api3``. Credentials have no update endpoint."""

    def __init__(self, client: LookerClient) -> None:
        self.client = client

    def get(
        self, user_id: int, credential_id: str, *, cancel: threading.Event | None = None
    ) -> ApiCredential:
        return self.client.get(credentials_path(user_id, credential_id), ApiCredential, cancel=cancel)

    def create(
        self, user_id: int, credential: ApiCredential, *, cancel: threading.Event | None = None
    ) -> ApiCredential:
        return self.client.create(credentials_path(user_id), credential, ApiCredential, cancel=cancel)

    def delete(
        self, user_id: int, credential_id: str, *, cancel: threading.Event | None = None
    ) -> Response:
        return self.client.delete(credentials_path(user_id, credential_id), cancel=cancel)
