"""Configuration models for YAML-based provisioning."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from looker_provisioner.core.client import DEFAULT_TIMEOUT
from looker_provisioner.resources.api_credential import (
    ApiCredentialResource,  # noqa: TC001 - Pydantic needs this at runtime
)
from looker_provisioner.resources.base import Resource  # noqa: TC001 - Pydantic needs this at runtime
from looker_provisioner.resources.folder import (
    FolderLookup,  # noqa: TC001 - Pydantic needs this at runtime
)
from looker_provisioner.resources.model_set import (
    ModelSetResource,  # noqa: TC001 - Pydantic needs this at runtime
)
from looker_provisioner.resources.setting import (
    SettingResource,  # noqa: TC001 - Pydantic needs this at runtime
)


class ProviderConfig(BaseSettings):
    """Looker provider connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``LOOKER_`` prefix.  Constructor kwargs take precedence.

    Secrets (``client_secret``, ``access_token``) are typically provided via
    ``LOOKER_CLIENT_SECRET`` / ``LOOKER_ACCESS_TOKEN`` rather than YAML to
    avoid committing them to version control.
    """

    model_config = SettingsConfigDict(env_prefix="LOOKER_")

    base_url: str | None = None
    client_id: str | None = None
    client_secret: SecretStr | None = None
    access_token: SecretStr | None = None
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


class Config(BaseModel):
    """Provisioning configuration; validates YAML structure directly."""

    provider: ProviderConfig
    setting: SettingResource | None = None
    model_sets: Annotated[list[ModelSetResource], BeforeValidator(_none_to_list)] = []
    api_credentials: Annotated[list[ApiCredentialResource], BeforeValidator(_none_to_list)] = []
    folders: Annotated[list[FolderLookup], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def resources(self) -> list[Resource]:
        """All declared resources; ordering is not significant."""
        resources: list[Resource] = [*self.folders, *self.model_sets, *self.api_credentials]
        if self.setting is not None:
            resources.append(self.setting)
        return resources
