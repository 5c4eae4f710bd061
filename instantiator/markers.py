"""
Injection markers.

A field is injected when its annotation carries a marker whose kind is part
of the factory's marker set:

    class OrderService:
        repo: Annotated[OrderRepository, Inject()]
        cache: Annotated[Optional[Cache], Inject()] = None

Any class can act as a marker kind; ``Inject`` is the default one.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Optional


@dataclass(frozen=True)
class Inject:
    """
    Default injection marker.

    Usage:
        repo: Annotated[UserRepo, Inject()]
        repo: Annotated[UserRepo, Inject]
    """

    description: Optional[str] = None


def inject(description: Optional[str] = None) -> Inject:
    """
    Create the default injection marker.

    Example:
        class Handler:
            db: Annotated[Database, inject()]
    """
    return Inject(description=description)


def marker_kind(marker: Any) -> type:
    """Kind of a marker: the marker itself when it is a class, its class otherwise."""
    if isinstance(marker, type):
        return marker
    return type(marker)


DEFAULT_MARKERS: FrozenSet[type] = frozenset({Inject})


def normalize_markers(markers: Optional[Iterable[type]]) -> FrozenSet[type]:
    """Build a marker set, falling back to ``DEFAULT_MARKERS``."""
    if markers is None:
        return DEFAULT_MARKERS
    if isinstance(markers, type):
        return frozenset({markers})

    kinds = frozenset(markers)
    for kind in kinds:
        if not isinstance(kind, type):
            raise TypeError(f"Marker kinds must be classes, got {kind!r}")
    return kinds
