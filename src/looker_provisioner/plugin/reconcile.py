"""Settings reconciliation.

The settings aggregate is reconciled in four steps:

1. ``compute_changes`` diffs every explicitly configured field against the
   fetched aggregate and emits one ``ChangeRecord`` per differing field.
2. ``apply_constraints`` enforces the dependent-field rules over that
   change set. It is a pure function: no I/O, no mutation of its inputs.
3. ``build_patch`` turns the staged records into the minimal PATCH body.
4. ``apply`` sends the patch once and re-fetches the aggregate.

``plan`` runs steps 1-3 only, for previews.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from looker_provisioner.plugin.errors import SettingConstraintError
from looker_provisioner.resources.markers import ReadOnly, WriteOnly, marked_paths
from looker_provisioner.resources.setting import SETTING_ID, SettingResource

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterator

    from looker_provisioner.handlers.settings import Setting, SettingsHandler

logger = logging.getLogger(__name__)

SCALAR_GROUP = "scalar"
GROUPS = (
    SCALAR_GROUP,
    "marketplace_automation",
    "privatelabel_configuration",
    "custom_welcome_email",
    "embed_config",
)

_READ_ONLY = marked_paths(SettingResource, ReadOnly)
_WRITE_ONLY = marked_paths(SettingResource, WriteOnly)

_ADVANCED = "privatelabel_configuration.custom_welcome_email_advanced"
_WELCOME_ENABLED = "custom_welcome_email.enabled"
_ADVANCED_FIELDS = ("custom_welcome_email.subject", "custom_welcome_email.header")
_WELCOME_FIELDS = ("custom_welcome_email.content", *_ADVANCED_FIELDS)
_COOKIELESS = "embed_config.embed_cookieless_v2"
_EMBED_ENABLED = "embed_config.embed_enabled"
_LEGACY_COOKIELESS = "embed_cookieless_v2"
_LEGACY_EMBED_ENABLED = "embed_enabled"

_ADVANCED_REQUIRED = f"requires {_ADVANCED} = true"
_WELCOME_REQUIRED = f"requires {_WELCOME_ENABLED} = true"
_EMBED_REQUIRED = f"requires {_EMBED_ENABLED} = true"


class FieldState(str, Enum):
    UNCHANGED = "unchanged"
    LOCALLY_MODIFIED = "locally-modified"
    SERVER_CONSTRAINED_CLEARED = "server-constrained-cleared"


@dataclass(frozen=True)
class ChangeRecord:
    """One field-level difference between desired and fetched settings.

    Records in state ``SERVER_CONSTRAINED_CLEARED`` describe values the
    server drops on its own; they are reported but never sent.
    """

    path: str
    group: str
    old: Any
    new: Any
    state: FieldState = FieldState.LOCALLY_MODIFIED
    write_only: bool = False

    @property
    def staged(self) -> bool:
        return self.state is FieldState.LOCALLY_MODIFIED


@dataclass(frozen=True)
class SettingsPlan:
    current: Setting
    changes: list[ChangeRecord] = field(default_factory=list)
    patch: dict[str, Any] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.patch)

    @property
    def group_states(self) -> dict[str, FieldState]:
        return group_states(self.changes)


@dataclass(frozen=True)
class SettingsResult:
    setting: Setting
    changes: list[ChangeRecord] = field(default_factory=list)


# ── Path helpers ────────────────────────────────────────────────────


def group_of(path: str) -> str:
    head = path.split(".", 1)[0]
    return head if head in GROUPS else SCALAR_GROUP


def _lookup(obj: Any, path: str) -> Any:
    for part in path.split("."):
        if obj is None:
            return None
        obj = getattr(obj, part, None)
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    return obj


def _is_explicit(model: Any, path: str) -> bool:
    obj = model
    for part in path.split("."):
        if not isinstance(obj, BaseModel) or part not in obj.model_fields_set:
            return False
        obj = getattr(obj, part)
    return True


def _explicit_items(model: BaseModel, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(path, value)`` for every explicitly set leaf, in declaration order."""
    for name in type(model).model_fields:
        if name not in model.model_fields_set:
            continue
        value = getattr(model, name)
        path = f"{prefix}{name}"
        if isinstance(value, BaseModel):
            yield from _explicit_items(value, prefix=f"{path}.")
        else:
            yield path, value


def _non_empty(value: Any) -> bool:
    return value is not None and value != ""


# ── Reconciliation steps ────────────────────────────────────────────


def compute_changes(current: Setting, desired: SettingResource) -> list[ChangeRecord]:
    """Diff explicitly configured fields against the fetched aggregate.

    Read-only fields are skipped. Write-only fields cannot be compared, so
    any explicitly supplied one is always staged.
    """
    changes: list[ChangeRecord] = []
    for path, new in _explicit_items(desired):
        if path in _READ_ONLY:
            continue
        if path in _WRITE_ONLY:
            changes.append(ChangeRecord(path, group_of(path), None, new, write_only=True))
            continue
        old = _lookup(current, path)
        if old != new:
            changes.append(ChangeRecord(path, group_of(path), old, new))
    return changes


def _explicit_conflicts(
    desired: SettingResource, paths: tuple[str, ...], constraint: str
) -> Iterator[SettingConstraintError]:
    for path in paths:
        value = _lookup(desired, path)
        if _is_explicit(desired, path) and _non_empty(value):
            yield SettingConstraintError(path, value, constraint)


def _embedding_enabled(current: Setting) -> bool:
    enabled = _lookup(current, _EMBED_ENABLED)
    if enabled is None:
        enabled = _lookup(current, _LEGACY_EMBED_ENABLED)
    return enabled is True


def desired_violations(desired: SettingResource) -> list[SettingConstraintError]:
    """Constraint violations decidable from the desired configuration alone.

    Read-only fields are reported by the server, so a configured value for
    one never decides a rule here.
    """
    errors: list[SettingConstraintError] = []
    if _is_explicit(desired, _ADVANCED) and _lookup(desired, _ADVANCED) is False:
        errors.extend(_explicit_conflicts(desired, _ADVANCED_FIELDS, _ADVANCED_REQUIRED))
    if _is_explicit(desired, _WELCOME_ENABLED) and _lookup(desired, _WELCOME_ENABLED) is False:
        reported = {e.path for e in errors}
        errors.extend(
            e
            for e in _explicit_conflicts(desired, _WELCOME_FIELDS, _WELCOME_REQUIRED)
            if e.path not in reported
        )
    return errors


def apply_constraints(
    changes: list[ChangeRecord],
    current: Setting,
    desired: SettingResource,
) -> list[ChangeRecord]:
    """Apply the dependent-field rules to a change set, in fixed order.

    1. Advanced welcome email off: explicit non-empty ``subject``/``header``
       fail; otherwise they are cleared.
    2. Welcome email off: explicit non-empty ``content``/``subject``/``header``
       fail; otherwise they are cleared.
    3. Cookieless embedding on (nested or deprecated top-level flag) requires
       embedding to be enabled on the instance.

    Effective values are the desired value where explicitly set, else the
    fetched one. Read-only fields always come from the fetched aggregate.
    Returns a new list; the inputs are left untouched.

    Raises:
        SettingConstraintError: A rule cannot be satisfied.
    """
    staged = {c.path: c for c in changes}

    def effective(path: str) -> Any:
        if path in _READ_ONLY or not _is_explicit(desired, path):
            return _lookup(current, path)
        return _lookup(desired, path)

    def clear(path: str) -> None:
        prior = staged.get(path)
        if prior is not None and not prior.staged:
            return
        old = _lookup(current, path)
        if not _non_empty(old):
            staged.pop(path, None)
            return
        logger.debug("Server will clear %s", path)
        staged[path] = ChangeRecord(
            path, group_of(path), old, None, FieldState.SERVER_CONSTRAINED_CLEARED
        )

    if not effective(_ADVANCED):
        for err in _explicit_conflicts(desired, _ADVANCED_FIELDS, _ADVANCED_REQUIRED):
            raise err
        for path in _ADVANCED_FIELDS:
            clear(path)

    if not effective(_WELCOME_ENABLED):
        for err in _explicit_conflicts(desired, _WELCOME_FIELDS, _WELCOME_REQUIRED):
            raise err
        for path in _WELCOME_FIELDS:
            clear(path)

    for path in (_COOKIELESS, _LEGACY_COOKIELESS):
        if (
            _is_explicit(desired, path)
            and effective(path) is True
            and not _embedding_enabled(current)
        ):
            raise SettingConstraintError(path, True, _EMBED_REQUIRED)

    return list(staged.values())


def build_patch(changes: list[ChangeRecord]) -> dict[str, Any]:
    """Nest the staged records into a PATCH body. Cleared records are withheld."""
    patch: dict[str, Any] = {}
    for change in changes:
        if not change.staged:
            continue
        head, _, tail = change.path.partition(".")
        if tail:
            group = patch.get(head)
            if not isinstance(group, dict):
                group = patch[head] = {}
            group[tail] = change.new
        else:
            patch[head] = change.new
    return patch


def group_states(changes: list[ChangeRecord]) -> dict[str, FieldState]:
    """Summarize the change set per field group.

    A group with any staged change is ``LOCALLY_MODIFIED`` even if the
    server also clears some of its fields.
    """
    states = dict.fromkeys(GROUPS, FieldState.UNCHANGED)
    for change in changes:
        if change.staged:
            states[change.group] = FieldState.LOCALLY_MODIFIED
        elif states[change.group] is FieldState.UNCHANGED:
            states[change.group] = FieldState.SERVER_CONSTRAINED_CLEARED
    return states


def setting_attributes(setting: Setting) -> dict[str, Any]:
    """Flatten a fetched aggregate into stored attributes.

    Write-only fields are never returned by the API and are reported as None.
    """
    attrs: dict[str, Any] = {"id": SETTING_ID, **setting.model_dump(mode="json")}
    for path in _WRITE_ONLY:
        head, _, tail = path.partition(".")
        if not tail:
            attrs[head] = None
        elif isinstance(attrs.get(head), dict):
            attrs[head][tail] = None
    return attrs


# ── Orchestration ───────────────────────────────────────────────────


def plan(
    handler: SettingsHandler,
    desired: SettingResource,
    *,
    cancel: threading.Event | None = None,
) -> SettingsPlan:
    """Fetch, diff and constrain without mutating anything remote."""
    violations = desired_violations(desired)
    if violations:
        raise violations[0]

    current = handler.get(cancel=cancel)
    changes = apply_constraints(compute_changes(current, desired), current, desired)
    patch = build_patch(changes)
    logger.debug(
        "Settings plan: %d change(s), %d staged field(s)",
        len(changes),
        sum(1 for c in changes if c.staged),
    )
    return SettingsPlan(current=current, changes=changes, patch=patch)


def apply_plan(
    handler: SettingsHandler,
    settings_plan: SettingsPlan,
    *,
    cancel: threading.Event | None = None,
) -> SettingsResult:
    """Send a computed plan as a single PATCH and re-fetch the aggregate."""
    if not settings_plan.has_changes:
        logger.info("Settings are up to date")
        return SettingsResult(setting=settings_plan.current, changes=settings_plan.changes)

    logger.info("Updating settings: %s", ", ".join(sorted(settings_plan.patch)))
    handler.update(settings_plan.patch, cancel=cancel)
    return SettingsResult(setting=handler.get(cancel=cancel), changes=settings_plan.changes)


def apply(
    handler: SettingsHandler,
    desired: SettingResource,
    *,
    cancel: threading.Event | None = None,
) -> SettingsResult:
    """Reconcile the remote aggregate with *desired* using a single PATCH."""
    return apply_plan(handler, plan(handler, desired, cancel=cancel), cancel=cancel)
