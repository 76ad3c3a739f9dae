"""Nullability resolution for a single position.

A position is any place a value crosses the interface boundary: a return
value, a parameter, a property getter or setter. Markers reach a position from
decorators (`markers_of`) and from `typing.Annotated` metadata
(`annotation_markers`); the resolver combines them and enforces the
one-marker-per-position rule.
"""

from __future__ import annotations

import typing
from collections.abc import Iterable
from typing import Annotated, Any

from .errors import DuplicateNullabilityError
from .markers import MARKERS_ATTR, NullabilityMarker, Out, Ref


def markers_of(obj: object) -> tuple[NullabilityMarker, ...]:
    """Markers attached to a function or property by decorator."""
    return tuple(getattr(obj, MARKERS_ATTR, ()))


def strip_annotated(annotation: Any) -> Any:
    """Return the underlying type of an ``Annotated[...]`` annotation."""
    while typing.get_origin(annotation) is Annotated:
        annotation = annotation.__origin__
    return annotation


def annotation_markers(annotation: Any) -> tuple[NullabilityMarker, ...]:
    """Markers found in the `Annotated` metadata of an annotation.

    Metadata on an ``Out[...]`` / ``Ref[...]`` holder and on the holder's type
    argument describe the same position, so both are collected.
    """
    found: list[NullabilityMarker] = []
    if typing.get_origin(annotation) is Annotated:
        found.extend(
            m for m in annotation.__metadata__ if isinstance(m, NullabilityMarker)
        )
    base = strip_annotated(annotation)
    if typing.get_origin(base) in (Out, Ref):
        for arg in typing.get_args(base):
            found.extend(annotation_markers(arg))
    return tuple(found)


def resolve_nullability(
    markers: Iterable[NullabilityMarker], *, interface: str, position: str
) -> bool | None:
    """Decide whether ``None`` is allowed at a position.

    Args:
        markers: Every marker attached to the position.
        interface: Qualified interface name, for error messages.
        position: Human-readable position label, e.g. ``"setter of 'name'"``.

    Returns:
        ``True`` if ``None`` is allowed, ``False`` if it is forbidden, or
        ``None`` if no marker is present and the caller picks the default.

    Raises:
        DuplicateNullabilityError: If more than one marker is attached.
    """
    markers = tuple(markers)
    if len(markers) > 1:
        raise DuplicateNullabilityError(interface, position)
    if not markers:
        return None
    return markers[0].nullability.allows_none


def ensure_unmarked(
    markers: Iterable[NullabilityMarker], *, interface: str, position: str
) -> None:
    """Reject markers on a position whose nullability is already decided elsewhere."""
    if tuple(markers):
        raise DuplicateNullabilityError(interface, position)
