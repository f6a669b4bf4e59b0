"""Instance settings resource model.

The settings aggregate is a singleton: it always exists, is never created or
deleted, and is identified by the fixed id ``looker_settings``. Every field
is optional; only fields the caller sets are reconciled against the remote
value. An explicit ``null`` is a request to clear the remote value.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from looker_provisioner.resources.base import Resource
from looker_provisioner.resources.markers import Deprecated, ReadOnly, WriteOnly

SETTING_ID = "looker_settings"


class _Group(BaseModel):
    model_config = ConfigDict(extra="forbid")


class InstanceConfigBlock(_Group):
    feature_flags: dict[str, Any] | None = None
    license_features: dict[str, Any] | None = None


class MarketplaceAutomationBlock(_Group):
    install_enabled: bool | None = None
    update_looker_enabled: bool | None = None
    update_third_party_enabled: bool | None = None


class PrivatelabelBlock(_Group):
    logo_file: Annotated[str | None, WriteOnly()] = Field(
        default=None, description="Customer logo image, base64 encoded"
    )
    logo_url: Annotated[str | None, ReadOnly()] = None
    favicon_file: Annotated[str | None, WriteOnly()] = Field(
        default=None, description="Custom favicon image, base64 encoded"
    )
    favicon_url: Annotated[str | None, ReadOnly()] = None
    default_title: str | None = None
    show_help_menu: bool | None = None
    show_docs: bool | None = None
    show_email_sub_options: bool | None = None
    allow_looker_mentions: bool | None = None
    allow_looker_links: bool | None = None
    custom_welcome_email_advanced: bool | None = Field(
        default=None,
        description="Allow subject line and heading customization in custom welcome emails",
    )
    setup_mentions: bool | None = None
    alerts_logo: bool | None = None
    alerts_links: bool | None = None
    folders_mentions: bool | None = None


class CustomWelcomeEmailBlock(_Group):
    enabled: bool | None = None
    content: str | None = Field(default=None, description="Requires enabled")
    subject: str | None = Field(
        default=None,
        description="Requires enabled and privatelabel_configuration.custom_welcome_email_advanced",
    )
    header: str | None = Field(
        default=None,
        description="Requires enabled and privatelabel_configuration.custom_welcome_email_advanced",
    )


class EmbedConfigBlock(_Group):
    domain_allowlist: list[str] | None = None
    alert_url_allowlist: list[str] | None = None
    alert_url_param_owner: str | None = None
    alert_url_label: str | None = None
    sso_auth_enabled: bool | None = None
    embed_cookieless_v2: bool | None = Field(default=None, description="Requires embed_enabled")
    embed_content_navigation: bool | None = None
    embed_content_management: bool | None = None
    strict_sameorigin_for_login: bool | None = None
    look_filters: bool | None = None
    hide_look_navigation: bool | None = None
    embed_enabled: Annotated[bool | None, ReadOnly()] = Field(
        default=None, description="True if embedding is licensed for this instance"
    )


class SettingResource(Resource):
    """Instance-wide settings (singleton)."""

    resource_type: ClassVar[str] = "looker_setting"

    id: Annotated[Literal["looker_settings"], ReadOnly()] = SETTING_ID

    instance_config: Annotated[InstanceConfigBlock | None, ReadOnly()] = None
    extension_framework_enabled: bool | None = None
    extension_load_url_enabled: Annotated[
        bool | None,
        Deprecated("temporary setting that will become a no-op and then be removed"),
    ] = None
    marketplace_auto_install_enabled: Annotated[
        bool | None,
        Deprecated("use marketplace_automation.install_enabled instead"),
    ] = None
    marketplace_automation: MarketplaceAutomationBlock | None = None
    marketplace_enabled: bool | None = None
    marketplace_site: Annotated[str | None, ReadOnly()] = None
    marketplace_terms_accepted: bool | None = Field(
        default=None, description="Marketplace terms cannot be declined once accepted"
    )
    privatelabel_configuration: PrivatelabelBlock | None = None
    custom_welcome_email: CustomWelcomeEmailBlock | None = None
    onboarding_enabled: bool | None = None
    timezone: str | None = None
    allow_user_timezones: bool | None = None
    data_connector_default_enabled: bool | None = None
    host_url: str | None = None
    override_warnings: Annotated[bool | None, WriteOnly()] = Field(
        default=None, description="Force a host_url change past warnings; not a stored setting"
    )
    email_domain_allowlist: list[str] | None = None
    embed_cookieless_v2: Annotated[
        bool | None,
        Deprecated("use embed_config.embed_cookieless_v2 instead"),
    ] = None
    embed_enabled: Annotated[bool | None, ReadOnly()] = None
    embed_config: EmbedConfigBlock | None = None
    login_notification_enabled: Annotated[bool | None, ReadOnly()] = None
    login_notification_text: Annotated[str | None, ReadOnly()] = None
    dashboard_auto_refresh_restriction: bool | None = None
    dashboard_auto_refresh_minimum_interval: str | None = Field(
        default=None, description="e.g. '30 seconds', '1 minute'"
    )
    managed_certificate_uri: list[str] | None = None

    def address_key(self) -> str:
        return "settings"
