"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from pydantic import ValidationError as SchemaError

    from looker_provisioner.config.loader import ConfigError
    from looker_provisioner.core.errors import (
        APIError,
        DecodeError,
        RequestCancelled,
        TransportError,
    )
    from looker_provisioner.plugin.errors import (
        ResourceNotFoundError,
        SettingConstraintError,
        UpdateNotSupportedError,
        ValidationError,
    )

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, ValidationError):
        _err("Validation failed:", fg=fg)
        for e in exc.errors:
            _err(f"  - {e}", fg=fg)
    elif isinstance(exc, SchemaError):
        _err(f"Invalid input: {exc}", fg=fg)
    elif isinstance(exc, SettingConstraintError):
        _err(f"Constraint violated: {exc}", fg=fg)
    elif isinstance(exc, UpdateNotSupportedError):
        _err(f"Update not supported: {exc}", fg=fg)
    elif isinstance(exc, ResourceNotFoundError):
        _err(f"Not found: {exc}", fg=fg)
    elif isinstance(exc, APIError):
        _err(f"API error: {exc}", fg=fg)
        if exc.documentation_url:
            _err(f"  See {exc.documentation_url}", fg=fg)
    elif isinstance(exc, TransportError):
        _err(f"Connection error: {exc}", fg=fg)
    elif isinstance(exc, DecodeError):
        _err(f"Unexpected response: {exc}", fg=fg)
    elif isinstance(exc, RequestCancelled):
        _err("Request canceled.", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
