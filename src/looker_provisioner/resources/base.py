"""Base resource class for Looker resources."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Resource(BaseModel):
    """Base class for all Looker resources.

    Resources are pure data - they define the desired state.
    Handlers know how to CRUD resources.
    """

    model_config = ConfigDict(extra="forbid")

    resource_type: ClassVar[str]
    # Data sources are read-only lookups (no create/update/delete).
    data_source: ClassVar[bool] = False

    def address_key(self) -> str:
        """Human-readable key identifying this resource within its type."""
        return "default"

    @property
    def address(self) -> str:
        """Unique address for this resource (e.g., 'looker_model_set.marketing')."""
        return f"{self.resource_type}.{self.address_key()}"
