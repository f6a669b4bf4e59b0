"""Settings plan and resource output rendering (Terraform-style)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import typer

from looker_provisioner.plugin.reconcile import GROUPS, SCALAR_GROUP, FieldState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from looker_provisioner.plugin.reconcile import ChangeRecord, SettingsPlan


class _StateStyle(NamedTuple):
    color: str
    symbol: str


_STATE_STYLES: dict[FieldState, _StateStyle] = {
    FieldState.LOCALLY_MODIFIED: _StateStyle("yellow", "~"),
    FieldState.SERVER_CONSTRAINED_CLEARED: _StateStyle("red", "-"),
    FieldState.UNCHANGED: _StateStyle("bright_black", " "),
}

_SENSITIVE = "(sensitive value)"
_WRITE_ONLY = "(write-only value)"


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _align_values(items: dict[str, str]) -> list[tuple[str, str]]:
    """Right-pad keys so ``=`` signs align."""
    if not items:
        return []
    max_key = max(len(k) for k in items)
    return [(k.ljust(max_key), v) for k, v in items.items()]


def _format_value(value: Any) -> str:
    """Format a value for display in a diff block."""
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    return str(value)


def _record_value(record: ChangeRecord) -> str:
    if record.write_only:
        return _WRITE_ONLY
    text = f"{_format_value(record.old)} -> {_format_value(record.new)}"
    if record.state is FieldState.SERVER_CONSTRAINED_CLEARED:
        text += "  # cleared by server"
    return text


# ---------------------------------------------------------------------------
# Settings plan rendering
# ---------------------------------------------------------------------------


def _record_lines(records: Iterable[ChangeRecord], indent: str, *, color: bool) -> list[str]:
    style = styler(color)
    by_key = {r.path.rsplit(".", 1)[-1]: r for r in records}
    rendered = {k: _record_value(r) for k, r in by_key.items()}
    lines = []
    for key, value in _align_values(rendered):
        s = _STATE_STYLES[by_key[key.rstrip()].state]
        lines.append(style(f"{indent}{s.symbol} {key} = {value}", fg=s.color))
    return lines


def format_settings_plan(plan: SettingsPlan, *, color: bool = True) -> str:
    """Render the settings change records as one Terraform-style block."""
    if not plan.changes:
        return "No changes. Settings are up-to-date."

    style = styler(color)
    sc = {"fg": _STATE_STYLES[FieldState.LOCALLY_MODIFIED].color}
    lines = [
        style("  # looker_setting.settings will be updated in-place", bold=True, **sc),
        style('  ~ resource "looker_setting" "settings" {', **sc),
    ]

    by_group: dict[str, list[ChangeRecord]] = {}
    for record in plan.changes:
        by_group.setdefault(record.group, []).append(record)

    lines.extend(_record_lines(by_group.get(SCALAR_GROUP, []), "      ", color=color))
    states = plan.group_states
    for group in GROUPS:
        if group == SCALAR_GROUP or group not in by_group:
            continue
        gs = _STATE_STYLES[states[group]]
        nested = [r for r in by_group[group] if "." in r.path]
        whole = [r for r in by_group[group] if "." not in r.path]
        lines.extend(_record_lines(whole, "      ", color=color))
        if nested:
            lines.append(style(f"      {gs.symbol} {group} {{", fg=gs.color))
            lines.extend(_record_lines(nested, "          ", color=color))
            lines.append(style("        }", fg=gs.color))
    lines.append(style("    }", **sc))
    return "\n".join(lines)


def settings_summary(changes: list[ChangeRecord]) -> dict[str, int]:
    """Count staged and server-cleared fields."""
    summary = {"change": 0, "clear": 0}
    for c in changes:
        summary["change" if c.staged else "clear"] += 1
    return summary


def format_plan_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Plan: 2 to change, 1 cleared by server.``"""
    style = styler(color)
    change = f"{summary.get('change', 0)} to change"
    clear = f"{summary.get('clear', 0)} cleared by server"
    if color:
        change = style(change, fg="yellow") if summary.get("change") else change
        clear = style(clear, fg="red") if summary.get("clear") else clear
    return f"Plan: {change}, {clear}."


def format_apply_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Apply complete! Settings: 2 changed.``"""
    style = styler(color)
    header = style("Apply complete!", fg="green", bold=True)
    return f"{header} Settings: {summary.get('change', 0)} changed."


# ---------------------------------------------------------------------------
# Attribute rendering (show / folder / import)
# ---------------------------------------------------------------------------


def _attr_lines(
    attrs: Mapping[str, Any], indent: str, sensitive: frozenset[str] | set[str]
) -> list[str]:
    scalars: dict[str, str] = {}
    blocks: list[str] = []
    for key, value in attrs.items():
        if isinstance(value, dict):
            blocks.append(f"{indent}{key} {{")
            blocks.extend(_attr_lines(value, indent + "    ", frozenset()))
            blocks.append(f"{indent}}}")
        elif key in sensitive and value is not None:
            scalars[key] = _SENSITIVE
        else:
            scalars[key] = _format_value(value)
    return [f"{indent}{k} = {v}" for k, v in _align_values(scalars)] + blocks


def format_attributes(
    resource_type: str,
    name: str,
    attrs: Mapping[str, Any],
    *,
    sensitive: frozenset[str] | set[str] = frozenset(),
    data_source: bool = False,
    color: bool = True,
) -> str:
    """Render stored attributes as a Terraform-style ``resource`` or ``data`` block."""
    style = styler(color)
    keyword = "data" if data_source else "resource"
    lines = [
        style(f'{keyword} "{resource_type}" "{name}" {{', bold=True),
        *_attr_lines(attrs, "    ", sensitive),
        "}",
    ]
    return "\n".join(lines)
