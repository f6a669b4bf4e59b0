"""API credential handler implementing CRUD via ``/users/{id}/credentials_api3``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from looker_provisioner.core.errors import NotFoundError
from looker_provisioner.core.state import ResourceInstance
from looker_provisioner.handlers.api_credentials import ApiCredential
from looker_provisioner.plugin.errors import PluginError, UpdateNotSupportedError
from looker_provisioner.plugin.handlers import ResourceHandler
from looker_provisioner.resources.markers import force_new_fields

if TYPE_CHECKING:
    from looker_provisioner.plugin.handlers import PluginContext
    from looker_provisioner.resources.api_credential import ApiCredentialResource

logger = logging.getLogger(__name__)


def parse_import_id(import_id: str) -> tuple[int, str]:
    """Split ``<user_id>/<credential_id>``."""
    user_part, sep, cred_id = import_id.partition("/")
    if not sep or not user_part.isdigit() or not cred_id or "/" in cred_id:
        msg = f"invalid API credential import id {import_id!r}, expected <user_id>/<credential_id>"
        raise PluginError(msg)
    return int(user_part), cred_id


class ApiCredentialHandler(ResourceHandler["ApiCredentialResource"]):
    """Create/read/delete handler for API3 credentials.

    The secret is only returned by the create call; every later read carries
    it forward from the prior record.
    """

    resource_type = "looker_api_credential"

    def _read_attrs(
        self, cred: ApiCredential, user_id: int, client_secret: str | None
    ) -> dict[str, Any]:
        return {
            "id": cred.id,
            "user_id": user_id,
            "type": cred.type,
            "is_disabled": bool(cred.is_disabled),
            "client_id": cred.client_id,
            "client_secret": client_secret,
            "url": cred.url,
        }

    def create(self, ctx: PluginContext, desired: ApiCredentialResource) -> dict[str, Any]:
        body = ApiCredential(type=desired.type, is_disabled=desired.is_disabled)
        cred = ctx.provider.api_credentials.create(desired.user_id, body, cancel=ctx.cancel)
        logger.info("Created API credential %s for user %d", cred.id, desired.user_id)
        return self._read_attrs(cred, desired.user_id, cred.client_secret)

    def read(self, ctx: PluginContext, prior: ResourceInstance) -> dict[str, Any] | None:
        user_id = int(prior.attributes["user_id"])
        try:
            cred = ctx.provider.api_credentials.get(user_id, prior.id, cancel=ctx.cancel)
        except NotFoundError:
            return None
        return self._read_attrs(cred, user_id, prior.attributes.get("client_secret"))

    def update(
        self, ctx: PluginContext, desired: ApiCredentialResource, prior: ResourceInstance
    ) -> dict[str, Any]:
        _ = ctx
        changed = sorted(
            name
            for name in force_new_fields(desired) | {"is_disabled"}
            if prior.attributes.get(name) != getattr(desired, name)
        )
        raise UpdateNotSupportedError(self.resource_type, changed)

    def delete(self, ctx: PluginContext, prior: ResourceInstance) -> None:
        user_id = int(prior.attributes["user_id"])
        ctx.provider.api_credentials.delete(user_id, prior.id, cancel=ctx.cancel)
        logger.info("Deleted API credential %s for user %d", prior.id, user_id)
        prior.id = ""

    def import_resource(self, ctx: PluginContext, import_id: str) -> ResourceInstance | None:
        user_id, cred_id = parse_import_id(import_id)
        prior = ResourceInstance(
            resource_type=self.resource_type, id=cred_id, attributes={"user_id": user_id}
        )
        attrs = self.read(ctx, prior)
        if attrs is None:
            return None
        return ResourceInstance.from_attributes(self.resource_type, attrs)
