"""Resource handlers, registry and settings reconciliation."""

from looker_provisioner.plugin.api_credential_handler import ApiCredentialHandler
from looker_provisioner.plugin.errors import (
    PluginError,
    ResourceNotFoundError,
    SettingConstraintError,
    UnknownResourceTypeError,
    UpdateNotSupportedError,
    ValidationError,
)
from looker_provisioner.plugin.folder_handler import FolderHandler
from looker_provisioner.plugin.handlers import PluginContext, ResourceHandler
from looker_provisioner.plugin.model_set_handler import ModelSetHandler
from looker_provisioner.plugin.reconcile import ChangeRecord, FieldState
from looker_provisioner.plugin.registry import ResourceTypeRegistration, ResourceTypeRegistry
from looker_provisioner.plugin.setting_handler import SettingHandler

__all__ = [
    "ApiCredentialHandler",
    "ChangeRecord",
    "FieldState",
    "FolderHandler",
    "ModelSetHandler",
    "PluginContext",
    "PluginError",
    "ResourceHandler",
    "ResourceNotFoundError",
    "ResourceTypeRegistration",
    "ResourceTypeRegistry",
    "SettingConstraintError",
    "SettingHandler",
    "UnknownResourceTypeError",
    "UpdateNotSupportedError",
    "ValidationError",
]
