"""Core infrastructure components for Looker Provisioner."""

from looker_provisioner.core.client import ListOptions, LookerClient, Response
from looker_provisioner.core.errors import (
    APIError,
    DecodeError,
    LookerError,
    NotFoundError,
    RequestCancelled,
    TransportError,
)
from looker_provisioner.core.provider import (
    AccessTokenAuth,
    ClientCredentialsAuth,
    LookerProvider,
)
from looker_provisioner.core.state import ResourceInstance

__all__ = [
    "APIError",
    "AccessTokenAuth",
    "ClientCredentialsAuth",
    "DecodeError",
    "ListOptions",
    "LookerClient",
    "LookerError",
    "LookerProvider",
    "NotFoundError",
    "RequestCancelled",
    "ResourceInstance",
    "Response",
    "TransportError",
]
