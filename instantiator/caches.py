"""
Per-factory caches.

Both caches live as long as the factory owning them; there is no eviction.
"""

from typing import Any, Dict, Iterator, Optional, Set


class InstanceCache:
    """
    One instance per type.

    Holds instances the factory constructed (keyed by their class) as well
    as instances bound by the user (keyed by the bound type, which may be
    an interface).
    """

    __slots__ = ("_instances",)

    def __init__(self):
        self._instances: Dict[type, Any] = {}

    def get(self, tp: type) -> Optional[Any]:
        return self._instances.get(tp)

    def put(self, tp: type, instance: Any) -> None:
        self._instances[tp] = instance

    def __contains__(self, tp: object) -> bool:
        return tp in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[type]:
        return iter(self._instances)


class MissingImplementations:
    """Interfaces known to have no discoverable implementation."""

    __slots__ = ("_missing",)

    def __init__(self):
        self._missing: Set[type] = set()

    def add(self, interface: type) -> None:
        self._missing.add(interface)

    def discard(self, interface: type) -> None:
        self._missing.discard(interface)

    def __contains__(self, interface: object) -> bool:
        return interface in self._missing

    def __len__(self) -> int:
        return len(self._missing)
