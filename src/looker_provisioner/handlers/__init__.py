"""Endpoint wrappers for Looker API concepts."""

from looker_provisioner.handlers.api_credentials import ApiCredential, ApiCredentialsHandler
from looker_provisioner.handlers.folders import Folder, FoldersHandler
from looker_provisioner.handlers.model_sets import ModelSet, ModelSetsHandler
from looker_provisioner.handlers.settings import Setting, SettingsHandler

__all__ = [
    "ApiCredential",
    "ApiCredentialsHandler",
    "Folder",
    "FoldersHandler",
    "ModelSet",
    "ModelSetsHandler",
    "Setting",
    "SettingsHandler",
]
