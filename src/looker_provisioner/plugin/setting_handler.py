"""Settings handler: the singleton is reconciled, never created or deleted."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from looker_provisioner.core.state import ResourceInstance
from looker_provisioner.plugin import reconcile
from looker_provisioner.plugin.handlers import ResourceHandler
from looker_provisioner.resources.markers import collect_deprecations
from looker_provisioner.resources.setting import SETTING_ID

if TYPE_CHECKING:
    from looker_provisioner.plugin.handlers import PluginContext
    from looker_provisioner.resources.setting import SettingResource

logger = logging.getLogger(__name__)


class SettingHandler(ResourceHandler["SettingResource"]):
    """Handler for the instance-wide settings aggregate."""

    resource_type = "looker_setting"

    def validate(self, ctx: PluginContext, desired: SettingResource) -> list[str]:
        _ = ctx
        for path, message in collect_deprecations(desired):
            logger.warning("%s: %s is deprecated: %s", desired.address, path, message)
        return [f"{desired.address}: {err}" for err in reconcile.desired_violations(desired)]

    def create(self, ctx: PluginContext, desired: SettingResource) -> dict[str, Any]:
        result = reconcile.apply(ctx.provider.settings, desired, cancel=ctx.cancel)
        return reconcile.setting_attributes(result.setting)

    def read(self, ctx: PluginContext, prior: ResourceInstance) -> dict[str, Any]:
        _ = prior
        return reconcile.setting_attributes(ctx.provider.settings.get(cancel=ctx.cancel))

    def update(
        self, ctx: PluginContext, desired: SettingResource, prior: ResourceInstance
    ) -> dict[str, Any]:
        _ = prior
        return self.create(ctx, desired)

    def delete(self, ctx: PluginContext, prior: ResourceInstance) -> None:
        _ = ctx
        logger.info("Settings cannot be deleted; only dropping the local record")
        prior.id = ""

    def import_resource(self, ctx: PluginContext, import_id: str) -> ResourceInstance:
        if import_id != SETTING_ID:
            logger.debug("Ignoring import id %r; settings always use %s", import_id, SETTING_ID)
        prior = ResourceInstance(resource_type=self.resource_type, id=SETTING_ID)
        return ResourceInstance.from_attributes(self.resource_type, self.read(ctx, prior))
