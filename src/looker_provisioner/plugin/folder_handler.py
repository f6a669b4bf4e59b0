"""Folder data source: look up an existing folder by id or exact name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from looker_provisioner.core.errors import NotFoundError
from looker_provisioner.plugin.errors import ResourceNotFoundError
from looker_provisioner.plugin.handlers import ResourceHandler
from looker_provisioner.resources.folder import FolderLookup

if TYPE_CHECKING:
    from looker_provisioner.core.state import ResourceInstance
    from looker_provisioner.handlers.folders import Folder
    from looker_provisioner.plugin.handlers import PluginContext

logger = logging.getLogger(__name__)


class FolderHandler(ResourceHandler["FolderLookup"]):
    """Read-only handler. Create and update resolve the lookup; delete only forgets it."""

    resource_type = "looker_folder"

    def _find_by_name(self, ctx: PluginContext, name: str) -> Folder | None:
        # The search endpoint also returns partial matches; the last exact one wins.
        match: Folder | None = None
        for folder in ctx.provider.folders.search(name, cancel=ctx.cancel):
            if folder.name == name:
                match = folder
        return match

    def _read_attrs(self, ctx: PluginContext, folder: Folder) -> dict[str, Any]:
        parent_id = folder.parent_id or ""
        parent_name = ""
        if parent_id:
            parent_name = ctx.provider.folders.get(parent_id, cancel=ctx.cancel).name
        return {
            "id": folder.id,
            "name": folder.name,
            "parent_id": parent_id,
            "parent_name": parent_name,
        }

    def lookup(self, ctx: PluginContext, desired: FolderLookup) -> dict[str, Any]:
        """Resolve *desired* to a folder.

        Raises:
            ResourceNotFoundError: No folder has that id or exact name.
        """
        if desired.id is not None:
            logger.debug("Looking up folder by id %s", desired.id)
            try:
                folder = ctx.provider.folders.get(desired.id, cancel=ctx.cancel)
            except NotFoundError as exc:
                raise ResourceNotFoundError(self.resource_type, f"id={desired.id}") from exc
        else:
            name = str(desired.name)
            logger.debug("Looking up folder by name %r", name)
            found = self._find_by_name(ctx, name)
            if found is None:
                raise ResourceNotFoundError(self.resource_type, f"name={name!r}")
            folder = found
        return self._read_attrs(ctx, folder)

    def create(self, ctx: PluginContext, desired: FolderLookup) -> dict[str, Any]:
        return self.lookup(ctx, desired)

    def read(self, ctx: PluginContext, prior: ResourceInstance) -> dict[str, Any] | None:
        try:
            folder = ctx.provider.folders.get(prior.id, cancel=ctx.cancel)
        except NotFoundError:
            return None
        return self._read_attrs(ctx, folder)

    def update(
        self, ctx: PluginContext, desired: FolderLookup, prior: ResourceInstance
    ) -> dict[str, Any]:
        _ = prior
        return self.lookup(ctx, desired)

    def delete(self, ctx: PluginContext, prior: ResourceInstance) -> None:
        _ = ctx
        prior.id = ""
