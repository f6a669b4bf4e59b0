"""Host-facing handler interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from looker_provisioner.core.state import ResourceInstance
from looker_provisioner.resources.base import Resource

if TYPE_CHECKING:
    import threading

    from looker_provisioner.core import LookerProvider

R = TypeVar("R", bound=Resource)


@dataclass(frozen=True)
class PluginContext:
    """Context passed to handlers.

    ``cancel`` is a cooperative cancellation token; when set, the in-flight
    request is abandoned and ``RequestCancelled`` propagates.
    """

    provider: LookerProvider
    cancel: threading.Event | None = None


class ResourceHandler(Generic[R]):
    """Base class for resource handlers.

    Handlers translate resources into Looker API calls. Subclass and
    override the CRUD methods. Validation is optional and must not touch
    the network.
    """

    resource_type: str = ""

    def validate(self, ctx: PluginContext, desired: R) -> list[str]:
        """Single-resource validation.

        Return list of error messages (empty = valid).
        """
        _ = ctx, desired
        return []

    def read(self, ctx: PluginContext, prior: ResourceInstance) -> dict[str, Any] | None:
        """Read the resource from Looker. Return None if it no longer exists."""
        raise NotImplementedError

    def create(self, ctx: PluginContext, desired: R) -> dict[str, Any]:
        """Create the resource in Looker. Return stored attributes."""
        raise NotImplementedError

    def update(self, ctx: PluginContext, desired: R, prior: ResourceInstance) -> dict[str, Any]:
        """Update the resource in Looker. Return stored attributes."""
        raise NotImplementedError

    def delete(self, ctx: PluginContext, prior: ResourceInstance) -> None:
        """Delete the resource from Looker and clear ``prior.id``."""
        raise NotImplementedError

    def import_resource(self, ctx: PluginContext, import_id: str) -> ResourceInstance | None:
        """Adopt an existing remote object by id.

        The default treats *import_id* as the remote id and reads it.
        """
        prior = ResourceInstance(resource_type=self.resource_type, id=import_id)
        attrs = self.read(ctx, prior)
        if attrs is None:
            return None
        return ResourceInstance.from_attributes(self.resource_type, attrs)
