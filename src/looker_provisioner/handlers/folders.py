"""Handler for Looker folders."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from looker_provisioner.core.client import API_VERSION, ListOptions

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterator

    from looker_provisioner.core.client import LookerClient

FOLDERS_PATH = f"{API_VERSION}/folders"


class Folder(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    parent_id: str | None = None
    creator_id: str | None = None
    is_personal: bool | None = None
    child_count: int | None = None


class FoldersHandler:
    """Read-only access to folders."""

    def __init__(self, client: LookerClient) -> None:
        self.client = client

    def get(self, folder_id: str, *, cancel: threading.Event | None = None) -> Folder:
        """Get a folder by id. Raises ``NotFoundError`` if it does not exist."""
        return self.client.get(f"{FOLDERS_PATH}/{folder_id}", Folder, cancel=cancel)

    def search(
        self,
        name: str,
        options: ListOptions | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> Iterator[Folder]:
        """Lazily iterate folders matching *name*.

        The API matches loosely (``Engineering`` also finds
        ``Engineering Archive``); callers filter for the exact name.
        """
        base = options or ListOptions()
        options = ListOptions(
            limit=base.limit,
            offset=base.offset,
            fields=base.fields,
            sorts=base.sorts,
            filters={**base.filters, "name": name},
        )
        return self.client.iter_list(f"{FOLDERS_PATH}/search", Folder, options, cancel=cancel)
