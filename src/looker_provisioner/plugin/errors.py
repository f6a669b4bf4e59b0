"""Plugin error types."""

from __future__ import annotations

from typing import Any


class PluginError(Exception):
    """Base exception for resource-handler errors."""


class UnknownResourceTypeError(PluginError):
    """Raised when a resource type has no registration/handler."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(f"Unknown resource type: {resource_type}")
        self.resource_type = resource_type


class ValidationError(PluginError):
    """One or more resources failed local validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        msg = "Validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class UpdateNotSupportedError(PluginError):
    """The resource type cannot be changed in place."""

    def __init__(self, resource_type: str, fields: list[str] | None = None) -> None:
        self.resource_type = resource_type
        self.fields = fields or []
        msg = f"{resource_type} cannot be updated in place; delete and recreate it"
        if self.fields:
            msg += f" (changed: {', '.join(self.fields)})"
        super().__init__(msg)


class ResourceNotFoundError(PluginError):
    """A lookup matched nothing on the remote side."""

    def __init__(self, resource_type: str, key: str) -> None:
        super().__init__(f"{resource_type} not found: {key}")
        self.resource_type = resource_type
        self.key = key


class SettingConstraintError(PluginError):
    """A dependent-field constraint on the settings aggregate was violated."""

    def __init__(self, path: str, value: Any, constraint: str) -> None:
        super().__init__(f"{path}={value!r}: {constraint}")
        self.path = path
        self.value = value
        self.constraint = constraint

