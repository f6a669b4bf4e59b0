"""Model set resource model."""

from __future__ import annotations

from typing import Annotated, ClassVar

from pydantic import Field

from looker_provisioner.resources.base import Resource
from looker_provisioner.resources.markers import Compare, ReadOnly


class ModelSetResource(Resource):
    """A named set of LookML models, used by roles to scope model access."""

    resource_type: ClassVar[str] = "looker_model_set"

    id: Annotated[str | None, ReadOnly()] = None
    name: str = Field(min_length=1, description="Name for the model set")
    models: Annotated[list[Annotated[str, Field(min_length=1)]], Compare("set")] = Field(
        description="LookML model names", min_length=1
    )

    def address_key(self) -> str:
        return self.name
