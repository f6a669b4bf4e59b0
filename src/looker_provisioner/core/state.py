"""Local resource records exchanged with the host runtime."""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Mapping


def _canonical_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)


def compute_attributes_hash(attrs: Mapping[str, Any]) -> str:
    """Compute a stable hash for a resource's stored attributes."""
    payload = _canonical_json(attrs)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ResourceInstance(BaseModel):
    """A tracked resource as the host runtime stores it.

    The host owns persistence; handlers only read ``attributes`` from the
    prior record and clear ``id`` when the remote object is gone.

    Attributes:
        resource_type: Type of the resource (e.g., "looker_model_set")
        id: Remote identifier; empty when the resource is not tracked
        attributes: Last known attribute values
        attributes_hash: SHA256 hash for change detection
        created_at: When the record was created
        updated_at: When the record was last refreshed
    """

    resource_type: str
    id: str = ""
    attributes: dict[str, Any] = Field(default_factory=dict)
    attributes_hash: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_attributes(cls, resource_type: str, attrs: Mapping[str, Any]) -> ResourceInstance:
        """Build a record from handler output, taking ``id`` from the attributes."""
        return cls(
            resource_type=resource_type,
            id=str(attrs.get("id") or ""),
            attributes=dict(attrs),
            attributes_hash=compute_attributes_hash(attrs),
        )

    @property
    def address(self) -> str:
        return f"{self.resource_type}.{self.id}"
