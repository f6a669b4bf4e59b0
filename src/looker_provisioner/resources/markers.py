"""Declarative field markers for resource and wire models.

Markers attach to Pydantic fields via ``Annotated``:

- ``ReadOnly``: computed by the server; never sent on write
- ``WriteOnly``: accepted on write; never returned by reads
- ``Sensitive``: value must not be echoed in logs or plan output
- ``Deprecated``: still accepted, but callers are warned
- ``ForceNew``: a change can only be applied by recreating the resource
- ``Compare``: field-level comparison strategy used when diffing

Helper functions introspect these markers at runtime (recursing into nested
models) so wire encoding, reconciliation and output rendering never keep
their own hand-written field lists.
"""

from __future__ import annotations

import types
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

M = TypeVar("M")
CompareStrategy: TypeAlias = Literal["exact", "set"]


# ── Marker dataclasses ──────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ReadOnly:
    """Server-computed field. Stripped from every outgoing payload."""


@dataclass(frozen=True, slots=True)
class WriteOnly:
    """Field accepted on write but never present in responses."""


@dataclass(frozen=True, slots=True)
class Sensitive:
    """Field holding a secret."""


@dataclass(frozen=True, slots=True)
class Deprecated:
    message: str


@dataclass(frozen=True, slots=True)
class ForceNew:
    """Changing this field requires delete + create."""


@dataclass(frozen=True, slots=True)
class Compare:
    """How a field should be compared against the remote value.

    - ``"exact"``: strict equality comparison
    - ``"set"``: order-insensitive list comparison
    """

    strategy: CompareStrategy


# ── Shared introspection primitives ─────────────────────────────────


def _find_marker(field_info: FieldInfo, marker_type: type[M]) -> M | None:
    """Return the first marker of *marker_type* on a field, or ``None``."""
    return next((m for m in field_info.metadata if isinstance(m, marker_type)), None)


def _model_cls(model_or_cls: Any) -> type[BaseModel]:
    return model_or_cls if isinstance(model_or_cls, type) else type(model_or_cls)


def _iter_marked_fields(
    model_or_cls: Any,
    marker_type: type[M],
) -> list[tuple[str, FieldInfo, M]]:
    """Return ``(field_name, field_info, marker)`` for every field carrying *marker_type*."""
    cls = _model_cls(model_or_cls)
    return [
        (name, fi, marker)
        for name, fi in cls.model_fields.items()
        if (marker := _find_marker(fi, marker_type)) is not None
    ]


def nested_model(fi: FieldInfo) -> type[BaseModel] | None:
    """Return the model class of a ``Model | None`` field, or ``None`` for scalars."""
    annotation = fi.annotation
    candidates = (
        typing.get_args(annotation)
        if isinstance(annotation, types.UnionType) or typing.get_origin(annotation) is typing.Union
        else (annotation,)
    )
    for c in candidates:
        if isinstance(c, type) and issubclass(c, BaseModel):
            return c
    return None


# ── Public helpers ──────────────────────────────────────────────────


def marked_paths(model_or_cls: Any, marker_type: type[Any], prefix: str = "") -> set[str]:
    """Dotted paths of every field (nested included) carrying *marker_type*.

    A marked nested model contributes its own path; its children are not listed.
    """
    cls = _model_cls(model_or_cls)
    paths: set[str] = set()
    for name, fi in cls.model_fields.items():
        path = f"{prefix}{name}"
        if _find_marker(fi, marker_type) is not None:
            paths.add(path)
            continue
        sub = nested_model(fi)
        if sub is not None:
            paths |= marked_paths(sub, marker_type, prefix=f"{path}.")
    return paths


def read_only_exclude(model_or_cls: Any) -> dict[str, Any]:
    """Build a ``model_dump(exclude=...)`` mapping dropping every ``ReadOnly`` field."""
    cls = _model_cls(model_or_cls)
    exclude: dict[str, Any] = {}
    for name, fi in cls.model_fields.items():
        if _find_marker(fi, ReadOnly) is not None:
            exclude[name] = True
            continue
        sub = nested_model(fi)
        if sub is not None and (sub_exclude := read_only_exclude(sub)):
            exclude[name] = sub_exclude
    return exclude


def to_wire(model: BaseModel) -> dict[str, Any]:
    """Encode a model for a write request.

    Only explicitly set fields are emitted (an explicit ``None`` becomes JSON
    ``null``); read-only fields are removed at every nesting level.
    """
    return model.model_dump(
        mode="json",
        by_alias=True,
        exclude_unset=True,
        exclude=read_only_exclude(model),  # type: ignore[arg-type]
    )


def collect_compare_strategies(resource_or_cls: Any) -> dict[str, CompareStrategy]:
    """Collect per-field compare strategies from ``Compare`` markers."""
    return {
        name: marker.strategy for name, _, marker in _iter_marked_fields(resource_or_cls, Compare)
    }


def values_differ(a: Any, b: Any, *, strategy: CompareStrategy | None = None) -> bool:
    """Compare two stored values.

    With ``strategy="set"`` two lists are compared order-insensitively; every
    other case uses strict equality.
    """
    if strategy == "set" and isinstance(a, list) and isinstance(b, list):
        return set(a) != set(b)
    return a != b


def align_unordered(
    resource_or_cls: Any, attrs: dict[str, Any], reference: dict[str, Any]
) -> dict[str, Any]:
    """Keep *reference* ordering for ``Compare("set")`` fields that match as sets.

    Returns a new dict; *attrs* is left untouched.
    """
    aligned = dict(attrs)
    for name, strategy in collect_compare_strategies(resource_or_cls).items():
        if strategy != "set" or name not in reference or name not in aligned:
            continue
        if not values_differ(aligned[name], reference[name], strategy=strategy):
            aligned[name] = reference[name]
    return aligned


def collect_deprecations(resource: BaseModel, prefix: str = "") -> list[tuple[str, str]]:
    """``(path, message)`` for every deprecated field the caller explicitly set."""
    found: list[tuple[str, str]] = []
    for name in sorted(resource.model_fields_set):
        fi = type(resource).model_fields[name]
        path = f"{prefix}{name}"
        marker = _find_marker(fi, Deprecated)
        if marker is not None:
            found.append((path, marker.message))
        value = getattr(resource, name)
        if isinstance(value, BaseModel):
            found.extend(collect_deprecations(value, prefix=f"{path}."))
    return found


def sensitive_fields(resource_or_cls: Any) -> set[str]:
    """Top-level field names marked ``Sensitive``."""
    return {name for name, _, _ in _iter_marked_fields(resource_or_cls, Sensitive)}


def force_new_fields(resource_or_cls: Any) -> set[str]:
    """Top-level field names marked ``ForceNew``."""
    return {name for name, _, _ in _iter_marked_fields(resource_or_cls, ForceNew)}
