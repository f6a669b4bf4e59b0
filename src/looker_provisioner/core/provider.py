"""Looker Provider - Connection configuration for a Looker instance."""

from functools import cached_property
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, SecretStr

from looker_provisioner.core.auth import LoginAuth, TokenAuth
from looker_provisioner.core.client import API_VERSION, DEFAULT_TIMEOUT, LookerClient

if TYPE_CHECKING:
    from looker_provisioner.handlers.api_credentials import ApiCredentialsHandler
    from looker_provisioner.handlers.folders import FoldersHandler
    from looker_provisioner.handlers.model_sets import ModelSetsHandler
    from looker_provisioner.handlers.settings import SettingsHandler


class ClientCredentialsAuth(BaseModel):
    """API3 client id/secret pair, exchanged for a token at login."""

    client_id: str
    client_secret: SecretStr


class AccessTokenAuth(BaseModel):
    """Pre-issued access token."""

    access_token: SecretStr


class LookerProvider(BaseModel):
    """Connection configuration for a Looker instance.

    Provide ``base_url`` and ``auth`` for normal use, or inject a ready-made
    client with `from_client` (tests, custom sessions).

    Examples:
        provider = LookerProvider(
            base_url="https://acme.cloud.looker.com/api/",
            auth=ClientCredentialsAuth(client_id="abc", client_secret="s3cr3t"),
        )
        provider.settings.get()
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    base_url: str | None = None
    auth: ClientCredentialsAuth | AccessTokenAuth | None = None
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True

    # Injected client (for testing / custom sessions)
    _injected_client: LookerClient | None = None

    @classmethod
    def from_client(cls, client: LookerClient) -> Self:
        """Create a provider with an injected client."""
        provider = cls.model_construct()
        provider._injected_client = client
        return provider

    @cached_property
    def client(self) -> LookerClient:
        """Get the API client."""
        if self._injected_client is not None:
            return self._injected_client

        if self.base_url is None or self.auth is None:
            raise ValueError(
                "Either provide base_url+auth, or use LookerProvider.from_client() "
                "to inject a client"
            )

        base_url = self.base_url.rstrip("/") + "/"
        if isinstance(self.auth, AccessTokenAuth):
            auth = TokenAuth(self.auth.access_token.get_secret_value())
        else:
            auth = LoginAuth(
                f"{base_url}{API_VERSION}/login",
                self.auth.client_id,
                self.auth.client_secret.get_secret_value(),
                timeout=self.timeout,
                verify_ssl=self.verify_ssl,
            )

        return LookerClient(
            base_url,
            auth=auth,
            timeout=self.timeout,
            verify_ssl=self.verify_ssl,
        )

    # Handlers for each Looker concept
    @cached_property
    def folders(self) -> "FoldersHandler":
        from looker_provisioner.handlers.folders import FoldersHandler

        return FoldersHandler(self.client)

    @cached_property
    def model_sets(self) -> "ModelSetsHandler":
        from looker_provisioner.handlers.model_sets import ModelSetsHandler

        return ModelSetsHandler(self.client)

    @cached_property
    def api_credentials(self) -> "ApiCredentialsHandler":
        from looker_provisioner.handlers.api_credentials import ApiCredentialsHandler

        return ApiCredentialsHandler(self.client)

    @cached_property
    def settings(self) -> "SettingsHandler":
        from looker_provisioner.handlers.settings import SettingsHandler

        return SettingsHandler(self.client)
