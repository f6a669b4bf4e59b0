"""Looker resource definitions."""

from looker_provisioner.resources.api_credential import ApiCredentialResource
from looker_provisioner.resources.folder import FolderLookup
from looker_provisioner.resources.model_set import ModelSetResource
from looker_provisioner.resources.setting import (
    SETTING_ID,
    CustomWelcomeEmailBlock,
    EmbedConfigBlock,
    InstanceConfigBlock,
    MarketplaceAutomationBlock,
    PrivatelabelBlock,
    SettingResource,
)

__all__ = [
    "SETTING_ID",
    "ApiCredentialResource",
    "CustomWelcomeEmailBlock",
    "EmbedConfigBlock",
    "FolderLookup",
    "InstanceConfigBlock",
    "MarketplaceAutomationBlock",
    "ModelSetResource",
    "PrivatelabelBlock",
    "SettingResource",
]
