"""Handler for the instance-wide settings aggregate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from pydantic import BaseModel, ConfigDict

from looker_provisioner.core.client import API_VERSION
from looker_provisioner.resources.markers import ReadOnly, WriteOnly

if TYPE_CHECKING:
    import threading
    from collections.abc import Mapping

    from looker_provisioner.core.client import LookerClient

SETTING_PATH = f"{API_VERSION}/setting"


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore")


class InstanceConfig(_Wire):
    feature_flags: dict[str, Any] | None = None
    license_features: dict[str, Any] | None = None


class MarketplaceAutomation(_Wire):
    install_enabled: bool | None = None
    update_looker_enabled: bool | None = None
    update_third_party_enabled: bool | None = None


class PrivatelabelConfiguration(_Wire):
    logo_file: Annotated[str | None, WriteOnly()] = None
    logo_url: Annotated[str | None, ReadOnly()] = None
    favicon_file: Annotated[str | None, WriteOnly()] = None
    favicon_url: Annotated[str | None, ReadOnly()] = None
    default_title: str | None = None
    show_help_menu: bool | None = None
    show_docs: bool | None = None
    show_email_sub_options: bool | None = None
    allow_looker_mentions: bool | None = None
    allow_looker_links: bool | None = None
    custom_welcome_email_advanced: bool | None = None
    setup_mentions: bool | None = None
    alerts_logo: bool | None = None
    alerts_links: bool | None = None
    folders_mentions: bool | None = None


class CustomWelcomeEmail(_Wire):
    enabled: bool | None = None
    content: str | None = None
    subject: str | None = None
    header: str | None = None


class EmbedConfig(_Wire):
    domain_allowlist: list[str] | None = None
    alert_url_allowlist: list[str] | None = None
    alert_url_param_owner: str | None = None
    alert_url_label: str | None = None
    sso_auth_enabled: bool | None = None
    embed_cookieless_v2: bool | None = None
    embed_content_navigation: bool | None = None
    embed_content_management: bool | None = None
    strict_sameorigin_for_login: bool | None = None
    look_filters: bool | None = None
    hide_look_navigation: bool | None = None
    embed_enabled: Annotated[bool | None, ReadOnly()] = None


class Setting(_Wire):
    """Wire shape of ``GET/PATCH /setting``."""

    instance_config: Annotated[InstanceConfig | None, ReadOnly()] = None
    extension_framework_enabled: bool | None = None
    extension_load_url_enabled: bool | None = None
    marketplace_auto_install_enabled: bool | None = None
    marketplace_automation: MarketplaceAutomation | None = None
    marketplace_enabled: bool | None = None
    marketplace_site: Annotated[str | None, ReadOnly()] = None
    marketplace_terms_accepted: bool | None = None
    privatelabel_configuration: PrivatelabelConfiguration | None = None
    custom_welcome_email: CustomWelcomeEmail | None = None
    onboarding_enabled: bool | None = None
    timezone: str | None = None
    allow_user_timezones: bool | None = None
    data_connector_default_enabled: bool | None = None
    host_url: str | None = None
    override_warnings: Annotated[bool | None, WriteOnly()] = None
    email_domain_allowlist: list[str] | None = None
    embed_cookieless_v2: bool | None = None
    embed_enabled: Annotated[bool | None, ReadOnly()] = None
    embed_config: EmbedConfig | None = None
    login_notification_enabled: Annotated[bool | None, ReadOnly()] = None
    login_notification_text: Annotated[str | None, ReadOnly()] = None
    dashboard_auto_refresh_restriction: bool | None = None
    dashboard_auto_refresh_minimum_interval: str | None = None
    managed_certificate_uri: list[str] | None = None


class SettingsHandler:
    """Get/update for the settings singleton. There is no create or delete endpoint."""

    def __init__(self, client: LookerClient) -> None:
        self.client = client

    def get(self, *, cancel: threading.Event | None = None) -> Setting:
        return self.client.get(SETTING_PATH, Setting, cancel=cancel)

    def update(
        self,
        patch: Setting | Mapping[str, Any],
        *,
        cancel: threading.Event | None = None,
    ) -> Setting:
        """PATCH the settings.

        A ``Mapping`` patch is validated into ``Setting`` first so unknown keys
        and read-only fields never reach the wire.
        """
        body = patch if isinstance(patch, Setting) else Setting.model_validate(patch)
        return self.client.update(SETTING_PATH, body, Setting, cancel=cancel)
