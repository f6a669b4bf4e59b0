"""Command-line entry point for ``looker-provisioner``.

Top-level commands (``validate``, ``folder``, ``import``) and the
``settings show|plan|apply`` group are defined in ``commands``.
"""

from __future__ import annotations

import logging
import os
import sys

import typer

from looker_provisioner import __version__

app = typer.Typer(
    name="looker-provisioner",
    help="Declarative provisioning for Looker instances.",
    no_args_is_help=True,
    add_completion=False,
)

settings_app = typer.Typer(
    name="settings",
    help="Inspect and reconcile the instance-wide settings.",
    no_args_is_help=True,
)
app.add_typer(settings_app, name="settings")

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
# Indexed by the number of -v flags.
_VERBOSITY = (logging.WARNING, logging.INFO, logging.DEBUG)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"looker-provisioner {__version__}")
        raise typer.Exit


def _log_level(verbose: int) -> int | None:
    """Resolve the package log level; ``LOOKER_LOG`` wins over ``-v`` flags.

    Returns None when neither asks for anything.
    """
    name = os.environ.get("LOOKER_LOG", "").strip().lower()
    if name in _LEVELS:
        return _LEVELS[name]
    if name:
        typer.echo(
            f"WARNING: ignoring LOOKER_LOG={name!r}, expected one of {', '.join(_LEVELS)}",
            err=True,
        )
    if verbose <= 0:
        return None
    return _VERBOSITY[min(verbose, len(_VERBOSITY) - 1)]


def _configure_logging(verbose: int) -> None:
    """Send package logs to stderr at the requested level.

    ``-vvv`` also enables urllib3's connection-level debug output.
    """
    level = _log_level(verbose)
    if level is None:
        return
    logging.basicConfig(
        level=logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("looker_provisioner").setLevel(level)
    if verbose >= 3:
        logging.getLogger("urllib3").setLevel(logging.DEBUG)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v info, -vv debug, -vvv HTTP wire).",
    ),
) -> None:
    _ = version
    _configure_logging(verbose)


from looker_provisioner.cli import commands as _commands  # noqa: E402, F401
