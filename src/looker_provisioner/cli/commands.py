"""CLI command implementations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from looker_provisioner.cli import app, settings_app
from looker_provisioner.cli.errors import handle_error

if TYPE_CHECKING:
    from looker_provisioner.config.schema import Config
    from looker_provisioner.plugin.reconcile import SettingsPlan, SettingsResult

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the configuration file."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]

AutoApprove = Annotated[
    bool,
    typer.Option("--auto-approve", help="Skip interactive approval."),
]

_DEFAULT_CONFIG = Path("looker-provisioner.yaml")


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _apply_with_status(plan_obj: SettingsPlan, cfg: Config, *, color: bool) -> SettingsResult:
    """Apply a settings plan behind a Rich spinner."""
    from rich.console import Console

    from looker_provisioner.config import apply_settings

    console = Console(no_color=not color, stderr=True)
    with console.status("looker_setting.settings: Modifying..."):
        result = apply_settings(cfg, plan_obj)
    console.print("  looker_setting.settings: Modifications complete")
    return result


@app.command()
def validate(
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Validate the configuration file without contacting Looker."""
    from looker_provisioner.cli.formatting import styler
    from looker_provisioner.config import load
    from looker_provisioner.config import validate as validate_fn
    from looker_provisioner.plugin.errors import ValidationError

    color = _use_color(no_color)
    try:
        cfg = load(config)
        errors = validate_fn(cfg)
        if errors:
            raise ValidationError(errors)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(styler(color)("Configuration is valid.", fg="green"))


@settings_app.command(name="show")
def settings_show(
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Show the live settings."""
    from looker_provisioner.cli.formatting import format_attributes
    from looker_provisioner.config import load, show_settings

    color = _use_color(no_color)
    try:
        cfg = load(config)
        attrs = show_settings(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_attributes("looker_setting", "settings", attrs, color=color))


@settings_app.command(name="plan")
def settings_plan(
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Show the changes needed to reconcile the settings. Exits 2 if there are any."""
    from looker_provisioner.cli.formatting import (
        format_plan_summary,
        format_settings_plan,
        settings_summary,
    )
    from looker_provisioner.config import load, plan_settings

    color = _use_color(no_color)
    try:
        cfg = load(config)
        plan_obj = plan_settings(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_settings_plan(plan_obj, color=color))
    if plan_obj.changes:
        typer.echo()
        typer.echo(format_plan_summary(settings_summary(plan_obj.changes), color=color))

    if plan_obj.has_changes:
        raise typer.Exit(2)


@settings_app.command(name="apply")
def settings_apply(
    config: ConfigPath = _DEFAULT_CONFIG,
    auto_approve: AutoApprove = False,
    no_color: NoColor = False,
) -> None:
    """Reconcile the live settings with the configuration."""
    from looker_provisioner.cli.formatting import (
        format_apply_summary,
        format_plan_summary,
        format_settings_plan,
        settings_summary,
    )
    from looker_provisioner.config import load, plan_settings

    color = _use_color(no_color)
    try:
        cfg = load(config)
        plan_obj = plan_settings(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if not plan_obj.has_changes:
        typer.echo("No changes. Settings are up-to-date.")
        raise typer.Exit(0)

    summary = settings_summary(plan_obj.changes)
    typer.echo(format_settings_plan(plan_obj, color=color))
    typer.echo()
    typer.echo(format_plan_summary(summary, color=color))
    typer.echo()

    if not auto_approve:
        try:
            typer.confirm("Do you want to apply these changes?", abort=True)
        except typer.Abort as e:
            typer.echo("Apply canceled.", err=True)
            raise typer.Exit(1) from e

    try:
        _apply_with_status(plan_obj, cfg, color=color)
    except KeyboardInterrupt as e:
        typer.echo("Apply canceled.", err=True)
        raise typer.Exit(1) from e
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo()
    typer.echo(format_apply_summary(summary, color=color))


@app.command()
def folder(
    folder_id: Annotated[
        str | None,
        typer.Option("--id", help="Look up the folder by id."),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option("--name", help="Look up the folder by exact name."),
    ] = None,
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Look up a folder by id or exact name."""
    from looker_provisioner.cli.formatting import format_attributes
    from looker_provisioner.config import load, lookup_folder
    from looker_provisioner.config.loader import ConfigError

    color = _use_color(no_color)
    if (folder_id is None) == (name is None):
        exc = ConfigError("exactly one of --id or --name is required")
        raise typer.Exit(handle_error(exc, color=color))

    try:
        cfg = load(config)
        attrs = lookup_folder(cfg, folder_id=folder_id, name=name)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(
        format_attributes(
            "looker_folder", str(attrs["id"]), attrs, data_source=True, color=color
        )
    )


@app.command(name="import")
def import_cmd(
    resource_type: Annotated[
        str,
        typer.Argument(help="Resource type, e.g. looker_model_set."),
    ],
    import_id: Annotated[
        str,
        typer.Argument(help="Remote id (<user_id>/<credential_id> for API credentials)."),
    ],
    config: ConfigPath = _DEFAULT_CONFIG,
    no_color: NoColor = False,
) -> None:
    """Read an existing remote object and print its attributes."""
    from looker_provisioner.cli.formatting import format_attributes, styler
    from looker_provisioner.config import import_resource, load
    from looker_provisioner.config.registry import default_registry
    from looker_provisioner.plugin.errors import ResourceNotFoundError
    from looker_provisioner.resources.markers import sensitive_fields

    color = _use_color(no_color)
    try:
        cfg = load(config)
        registration = default_registry().get(resource_type)
        instance = import_resource(cfg, resource_type, import_id)
        if instance is None:
            raise ResourceNotFoundError(resource_type, import_id)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(styler(color)(f"Import successful: {instance.address}", fg="green"))
    typer.echo()
    typer.echo(
        format_attributes(
            resource_type,
            instance.id,
            instance.attributes,
            sensitive=sensitive_fields(registration.model),
            data_source=registration.data_source,
            color=color,
        )
    )
