"""Handler for Looker model sets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict

from looker_provisioner.core.client import API_VERSION
from looker_provisioner.resources.markers import ReadOnly

if TYPE_CHECKING:
    import threading

    from looker_provisioner.core.client import LookerClient, Response

MODEL_SETS_PATH = f"{API_VERSION}/model_sets"


class ModelSet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Annotated[str | None, ReadOnly()] = None
    name: str | None = None
    models: list[str] | None = None
    built_in: Annotated[bool | None, ReadOnly()] = None
    all_access: Annotated[bool | None, ReadOnly()] = None
    url: Annotated[str | None, ReadOnly()] = None


class ModelSetsHandler:
    """CRUD calls for ``/model_sets``."""

    def __init__(self, client: LookerClient) -> None:
        self.client = client

    def list(self, *, cancel: threading.Event | None = None) -> list[ModelSet]:
        return self.client.list(MODEL_SETS_PATH, ModelSet, cancel=cancel)

    def get(self, model_set_id: str, *, cancel: threading.Event | None = None) -> ModelSet:
        return self.client.get(f"{MODEL_SETS_PATH}/{model_set_id}", ModelSet, cancel=cancel)

    def create(self, model_set: ModelSet, *, cancel: threading.Event | None = None) -> ModelSet:
        return self.client.create(MODEL_SETS_PATH, model_set, ModelSet, cancel=cancel)

    def update(
        self, model_set_id: str, model_set: ModelSet, *, cancel: threading.Event | None = None
    ) -> ModelSet:
        return self.client.update(
            f"{MODEL_SETS_PATH}/{model_set_id}", model_set, ModelSet, cancel=cancel
        )

    def delete(self, model_set_id: str, *, cancel: threading.Event | None = None) -> Response:
        return self.client.delete(f"{MODEL_SETS_PATH}/{model_set_id}", cancel=cancel)
