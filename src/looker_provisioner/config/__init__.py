"""YAML configuration loading and convenience settings/lookup API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from looker_provisioner.config.loader import ConfigError, load_config
from looker_provisioner.config.registry import default_registry
from looker_provisioner.config.schema import Config, ProviderConfig
from looker_provisioner.core.provider import AccessTokenAuth, ClientCredentialsAuth, LookerProvider
from looker_provisioner.core.state import ResourceInstance
from looker_provisioner.plugin import reconcile
from looker_provisioner.plugin.handlers import PluginContext
from looker_provisioner.resources.folder import FolderLookup
from looker_provisioner.resources.setting import SETTING_ID

if TYPE_CHECKING:
    import threading
    from pathlib import Path

    from looker_provisioner.plugin.reconcile import SettingsPlan, SettingsResult
    from looker_provisioner.resources.setting import SettingResource

__all__ = [
    "Config",
    "ConfigError",
    "ProviderConfig",
    "apply_settings",
    "import_resource",
    "load",
    "load_config",
    "lookup_folder",
    "plan_settings",
    "provider_from_config",
    "show_settings",
    "validate",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def provider_from_config(config: Config) -> LookerProvider:
    """Build a ``LookerProvider`` from a ``Config`` instance.

    An access token wins over a client id/secret pair when both are set.
    """
    pc = config.provider
    if not pc.base_url:
        raise ConfigError("provider.base_url is required (set in YAML or LOOKER_BASE_URL env var)")

    auth: AccessTokenAuth | ClientCredentialsAuth
    if pc.access_token is not None:
        auth = AccessTokenAuth(access_token=pc.access_token)
    elif pc.client_id and pc.client_secret is not None:
        auth = ClientCredentialsAuth(client_id=pc.client_id, client_secret=pc.client_secret)
    else:
        raise ConfigError(
            "provider credentials are required: set LOOKER_CLIENT_ID and "
            "LOOKER_CLIENT_SECRET, or LOOKER_ACCESS_TOKEN"
        )
    return LookerProvider(
        base_url=pc.base_url,
        auth=auth,
        timeout=pc.timeout,
        verify_ssl=pc.verify_ssl,
    )


def _context(config: Config, cancel: threading.Event | None = None) -> PluginContext:
    return PluginContext(provider=provider_from_config(config), cancel=cancel)


def validate(config: Config) -> list[str]:
    """Run every handler's local validation. No network calls are made.

    Returns a list of error messages (empty = valid).
    """
    registry = default_registry()
    # validate() never touches the client; credentials may be absent here.
    ctx = PluginContext(provider=LookerProvider(base_url=config.provider.base_url))
    errors: list[str] = []
    for resource in config.resources:
        handler = registry.get(resource.resource_type).handler
        errors.extend(handler.validate(ctx, resource))
    return errors


def show_settings(config: Config, *, cancel: threading.Event | None = None) -> dict[str, Any]:
    """Fetch the live settings aggregate as stored attributes."""
    handler = default_registry().get("looker_setting").handler
    prior = ResourceInstance(resource_type="looker_setting", id=SETTING_ID)
    attrs = handler.read(_context(config, cancel), prior)
    return attrs or {}


def _desired_setting(config: Config) -> SettingResource:
    if config.setting is None:
        raise ConfigError("no `setting` section in configuration")
    return config.setting


def plan_settings(config: Config, *, cancel: threading.Event | None = None) -> SettingsPlan:
    """Preview the settings reconciliation without mutating anything."""
    desired = _desired_setting(config)
    ctx = _context(config, cancel)
    return reconcile.plan(ctx.provider.settings, desired, cancel=cancel)


def apply_settings(
    config: Config,
    plan_obj: SettingsPlan | None = None,
    *,
    cancel: threading.Event | None = None,
) -> SettingsResult:
    """Reconcile the live settings aggregate with the configuration.

    Pass *plan_obj* to apply a plan the operator already reviewed.
    """
    desired = _desired_setting(config)
    ctx = _context(config, cancel)
    if plan_obj is None:
        return reconcile.apply(ctx.provider.settings, desired, cancel=cancel)
    return reconcile.apply_plan(ctx.provider.settings, plan_obj, cancel=cancel)


def lookup_folder(
    config: Config,
    *,
    folder_id: str | None = None,
    name: str | None = None,
    cancel: threading.Event | None = None,
) -> dict[str, Any]:
    """Resolve a folder by id or exact name."""
    lookup = FolderLookup(id=folder_id, name=name)
    handler = default_registry().get(FolderLookup.resource_type).handler
    return handler.create(_context(config, cancel), lookup)


def import_resource(
    config: Config,
    resource_type: str,
    import_id: str,
    *,
    cancel: threading.Event | None = None,
) -> ResourceInstance | None:
    """Adopt an existing remote object. Returns None if it does not exist."""
    handler = default_registry().get(resource_type).handler
    return handler.import_resource(_context(config, cancel), import_id)
