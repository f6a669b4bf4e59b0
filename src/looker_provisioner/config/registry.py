"""Default resource type registry factory."""

from __future__ import annotations

from looker_provisioner.plugin.api_credential_handler import ApiCredentialHandler
from looker_provisioner.plugin.folder_handler import FolderHandler
from looker_provisioner.plugin.model_set_handler import ModelSetHandler
from looker_provisioner.plugin.registry import ResourceTypeRegistry
from looker_provisioner.plugin.setting_handler import SettingHandler
from looker_provisioner.resources.api_credential import ApiCredentialResource
from looker_provisioner.resources.folder import FolderLookup
from looker_provisioner.resources.model_set import ModelSetResource
from looker_provisioner.resources.setting import SettingResource


def default_registry() -> ResourceTypeRegistry:
    """Create a fresh registry with all built-in resource types and handlers."""
    registry = ResourceTypeRegistry()

    registry.register(FolderLookup, FolderHandler())
    registry.register(ModelSetResource, ModelSetHandler())
    registry.register(ApiCredentialResource, ApiCredentialHandler())
    registry.register(SettingResource, SettingHandler())

    return registry
