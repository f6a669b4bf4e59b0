"""Model set handler implementing CRUD via ``/model_sets``."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from looker_provisioner.core.errors import NotFoundError
from looker_provisioner.handlers.model_sets import ModelSet
from looker_provisioner.plugin.handlers import ResourceHandler
from looker_provisioner.resources.markers import align_unordered
from looker_provisioner.resources.model_set import ModelSetResource

if TYPE_CHECKING:
    from looker_provisioner.core.state import ResourceInstance
    from looker_provisioner.plugin.handlers import PluginContext

logger = logging.getLogger(__name__)


class ModelSetHandler(ResourceHandler[ModelSetResource]):
    """CRUD handler for model sets."""

    resource_type = "looker_model_set"

    def _read_attrs(
        self, model_set: ModelSet, reference: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        attrs = {
            "id": model_set.id,
            "name": model_set.name,
            "models": list(model_set.models or []),
        }
        return align_unordered(ModelSetResource, attrs, reference or {})

    def _body(self, desired: ModelSetResource) -> ModelSet:
        return ModelSet(name=desired.name, models=list(desired.models))

    def validate(self, ctx: PluginContext, desired: ModelSetResource) -> list[str]:
        _ = ctx
        dupes = sorted(m for m, n in Counter(desired.models).items() if n > 1)
        if dupes:
            return [f"{desired.address}: duplicate models: {', '.join(dupes)}"]
        return []

    def create(self, ctx: PluginContext, desired: ModelSetResource) -> dict[str, Any]:
        created = ctx.provider.model_sets.create(self._body(desired), cancel=ctx.cancel)
        logger.info("Created model set %s (id=%s)", desired.name, created.id)
        return self._read_attrs(created, {"models": desired.models})

    def read(self, ctx: PluginContext, prior: ResourceInstance) -> dict[str, Any] | None:
        try:
            model_set = ctx.provider.model_sets.get(prior.id, cancel=ctx.cancel)
        except NotFoundError:
            return None
        return self._read_attrs(model_set, prior.attributes)

    def update(
        self, ctx: PluginContext, desired: ModelSetResource, prior: ResourceInstance
    ) -> dict[str, Any]:
        updated = ctx.provider.model_sets.update(prior.id, self._body(desired), cancel=ctx.cancel)
        return self._read_attrs(updated, {"models": desired.models})

    def delete(self, ctx: PluginContext, prior: ResourceInstance) -> None:
        try:
            ctx.provider.model_sets.delete(prior.id, cancel=ctx.cancel)
        except NotFoundError:
            logger.info("Model set %s already gone", prior.id)
        prior.id = ""
