"""API credential resource model."""

from __future__ import annotations

from typing import Annotated, ClassVar

from pydantic import Field

from looker_provisioner.resources.base import Resource
from looker_provisioner.resources.markers import ForceNew, ReadOnly, Sensitive


class ApiCredentialResource(Resource):
    """An API3 client id/secret pair owned by a user.

    Credentials cannot be modified in place. ``client_secret`` is returned by
    the API exactly once, in the create response.
    """

    resource_type: ClassVar[str] = "looker_api_credential"

    user_id: Annotated[int, ForceNew()] = Field(ge=1, description="ID of the owning user")
    type: Annotated[str, ForceNew()] = Field(
        default="api3", min_length=1, description="Type of API credential"
    )
    is_disabled: bool = False

    id: Annotated[str | None, ReadOnly()] = None
    client_id: Annotated[str | None, ReadOnly()] = None
    client_secret: Annotated[str | None, ReadOnly(), Sensitive()] = None
    url: Annotated[str | None, ReadOnly()] = None

    def address_key(self) -> str:
        return f"user_{self.user_id}" if self.id is None else f"user_{self.user_id}_{self.id}"
