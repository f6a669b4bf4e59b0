"""Folder lookup (data source) model."""

from __future__ import annotations

from typing import Annotated, ClassVar, Self

from pydantic import Field, model_validator

from looker_provisioner.resources.base import Resource
from looker_provisioner.resources.markers import ReadOnly


class FolderLookup(Resource):
    """Find an existing folder by id or by exact name.

    Exactly one of ``id`` and ``name`` must be given.
    """

    resource_type: ClassVar[str] = "looker_folder"
    data_source: ClassVar[bool] = True

    id: str | None = Field(default=None, min_length=1, description="Search folder based on id")
    name: str | None = Field(default=None, min_length=1, description="Search folder based on name")
    parent_id: Annotated[str | None, ReadOnly()] = None
    parent_name: Annotated[str | None, ReadOnly()] = None

    @model_validator(mode="after")
    def _exactly_one_key(self) -> Self:
        if (self.id is None) == (self.name is None):
            given = "both" if self.id is not None else "neither"
            msg = f"exactly one of 'id' or 'name' must be set for a folder lookup ({given} given)"
            raise ValueError(msg)
        return self

    def address_key(self) -> str:
        return self.id if self.id is not None else str(self.name)
