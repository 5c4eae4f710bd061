"""
Type and field introspection.

The capabilities the factory consumes from the language runtime:

- classify a type as interface or concrete
- decide whether a class implements an interface (nominally or structurally)
- enumerate the injectable fields of a class
- construct a default instance of a class
- assign a field on an instance, bypassing ``__setattr__`` overrides
"""

import inspect
import logging
import types
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Generic,
    List,
    Optional,
    Protocol,
    Set,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .errors import AssignmentError, ConstructionError, type_name
from .markers import marker_kind

logger = logging.getLogger("instantiator.introspection")

_UNION_TYPES = (Union, types.UnionType)


# ============================================================================
# Type classification
# ============================================================================

def is_protocol(tp: Any) -> bool:
    """True for classes declared as ``typing.Protocol``."""
    return isinstance(tp, type) and tp is not Protocol and bool(getattr(tp, "_is_protocol", False))


def is_interface(tp: Any) -> bool:
    """
    True for types that cannot be constructed directly.

    Protocols and abstract classes (with unimplemented abstract members)
    are interfaces; every other class is concrete.
    """
    if not isinstance(tp, type):
        return False
    return is_protocol(tp) or inspect.isabstract(tp)


def protocol_members(proto: type) -> Set[str]:
    """Public members a class must provide to satisfy ``proto``."""
    members: Set[str] = set()
    for base in proto.__mro__:
        if base in (object, Protocol, Generic) or not getattr(base, "_is_protocol", False):
            continue
        members.update(name for name in base.__dict__ if not name.startswith("_"))
        members.update(name for name in inspect.get_annotations(base) if not name.startswith("_"))
    return members


def _declared_names(cls: type) -> Set[str]:
    names: Set[str] = set()
    for base in cls.__mro__:
        names.update(inspect.get_annotations(base))
    return names


def implements_protocol(candidate: type, proto: type) -> bool:
    """Structural check: ``candidate`` provides every member of ``proto``."""
    declared = _declared_names(candidate)
    return all(
        hasattr(candidate, name) or name in declared
        for name in protocol_members(proto)
    )


def is_assignable(target: type, candidate: Any) -> bool:
    """
    Check whether instances of ``candidate`` can be used where ``target`` is expected.

    Uses ``issubclass`` where the runtime supports it and falls back to a
    structural check for protocols that reject ``issubclass``.
    """
    if not isinstance(candidate, type) or not isinstance(target, type):
        return False
    if candidate is target:
        return True
    try:
        return issubclass(candidate, target)
    except TypeError:
        if not is_protocol(target):
            return False
        return implements_protocol(candidate, target)


def conforms(value: Any, target: type) -> bool:
    """Check an object against a declared type."""
    try:
        return isinstance(value, target)
    except TypeError:
        if not is_protocol(target):
            return False
        return all(hasattr(value, name) for name in protocol_members(target))


def unwrap_optional(hint: Any) -> Any:
    """``Optional[T]`` and ``T | None`` become ``T``; other hints pass through."""
    if get_origin(hint) in _UNION_TYPES:
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


# ============================================================================
# Field enumeration
# ============================================================================

@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """An annotated field of a class, with its markers."""

    owner: type
    name: str
    declared_type: Any
    markers: Tuple[Any, ...] = ()

    @property
    def marker_kinds(self) -> FrozenSet[type]:
        return frozenset(marker_kind(m) for m in self.markers)

    def is_marked(self, kinds: FrozenSet[type]) -> bool:
        """True if any of this field's markers is one of ``kinds``."""
        return not self.marker_kinds.isdisjoint(kinds)

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"


def describe_hint(owner: type, name: str, hint: Any) -> Optional[FieldDescriptor]:
    """Split an annotation into declared type and markers. ``ClassVar`` yields None."""
    markers: Tuple[Any, ...] = ()
    hint = unwrap_optional(hint)

    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        markers = tuple(metadata)
        hint = unwrap_optional(base)

    if hint is ClassVar or get_origin(hint) is ClassVar:
        return None

    return FieldDescriptor(owner=owner, name=name, declared_type=hint, markers=markers)


class FieldInspector:
    """
    Enumerates the annotated fields of classes.

    Fields are collected across the MRO so subclasses inherit the
    injection points of their bases; a subclass annotation overrides the
    base one. Results are cached per class.
    """

    def __init__(self):
        self._cache: Dict[type, List[FieldDescriptor]] = {}

    def fields(self, cls: type) -> List[FieldDescriptor]:
        """All annotated fields of ``cls``."""
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        hints: Dict[str, Any] = {}
        owners: Dict[str, type] = {}
        for base in reversed(cls.__mro__):
            if base is object:
                continue
            own = inspect.get_annotations(base)
            if not own:
                continue
            try:
                resolved = get_type_hints(base, include_extras=True)
            except Exception as e:
                logger.warning(f"Could not evaluate annotations of {type_name(base)}, skipping them: {e}")
                continue
            for name in own:
                hints[name] = resolved.get(name, own[name])
                owners[name] = base

        descriptors = []
        for name, hint in hints.items():
            descriptor = describe_hint(owners[name], name, hint)
            if descriptor is not None:
                descriptors.append(descriptor)

        self._cache[cls] = descriptors
        return descriptors

    def injectable_fields(self, cls: type, kinds: FrozenSet[type]) -> List[FieldDescriptor]:
        """Fields of ``cls`` carrying a marker of one of ``kinds``."""
        return [f for f in self.fields(cls) if f.is_marked(kinds)]


# ============================================================================
# Construction and assignment
# ============================================================================

def construct(cls: type) -> Any:
    """
    Construct a default instance of ``cls``.

    Raises:
        ConstructionError: If ``cls`` is not a class or its constructor fails
    """
    if not isinstance(cls, type):
        raise ConstructionError(cls)
    try:
        return cls()
    except Exception as e:
        raise ConstructionError(cls, e) from e


def assign_field(
    instance: Any,
    descriptor: FieldDescriptor,
    value: Any,
    *,
    check_type: bool = True,
) -> None:
    """
    Set ``descriptor`` on ``instance``, bypassing ``__setattr__`` overrides.

    Raises:
        AssignmentError: If the value does not conform to the declared type
            or the instance rejects the attribute
    """
    declared = descriptor.declared_type
    if check_type and isinstance(declared, type) and not conforms(value, declared):
        raise AssignmentError(
            type(instance),
            descriptor.name,
            value,
            reason=f"value does not conform to declared type {type_name(declared)}",
        )
    try:
        object.__setattr__(instance, descriptor.name, value)
    except (AttributeError, TypeError) as e:
        raise AssignmentError(type(instance), descriptor.name, value, cause=e) from e
