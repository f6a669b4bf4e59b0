"""Resource type registry for handler dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from looker_provisioner.plugin.errors import UnknownResourceTypeError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from looker_provisioner.plugin.handlers import ResourceHandler
    from looker_provisioner.resources.base import Resource


@dataclass(frozen=True)
class ResourceTypeRegistration:
    resource_type: str
    model: type[Resource]
    handler: ResourceHandler[Any]

    @property
    def data_source(self) -> bool:
        return self.model.data_source


class ResourceTypeRegistry:
    """Registry mapping resource_type -> (model, handler)."""

    def __init__(self) -> None:
        self._registrations: dict[str, ResourceTypeRegistration] = {}

    def register(self, model: type[Resource], handler: ResourceHandler[Any]) -> None:
        resource_type = getattr(model, "resource_type", None)
        if not isinstance(resource_type, str) or not resource_type:
            raise ValueError("Resource model must define a non-empty classvar `resource_type`")

        if resource_type in self._registrations:
            raise ValueError(f"Resource type already registered: {resource_type}")

        self._registrations[resource_type] = ResourceTypeRegistration(
            resource_type=resource_type,
            model=model,
            handler=handler,
        )

    def get(self, resource_type: str) -> ResourceTypeRegistration:
        try:
            return self._registrations[resource_type]
        except KeyError as e:
            raise UnknownResourceTypeError(resource_type) from e

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._registrations

    def __iter__(self) -> Iterator[ResourceTypeRegistration]:
        return iter(self._registrations.values())

    @property
    def resource_types(self) -> list[str]:
        return sorted(self._registrations)
