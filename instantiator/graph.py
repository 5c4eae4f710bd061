"""
Object graph rendering.
"""

from typing import TYPE_CHECKING, Any, List, Set

if TYPE_CHECKING:
    from .factory import ObjectFactory


def _field_value(instance: Any, name: str) -> Any:
    # object.__getattribute__ keeps mocks from inventing attributes
    try:
        return object.__getattribute__(instance, name)
    except AttributeError:
        return None


def render_tree(factory: "ObjectFactory", instance: Any) -> str:
    """
    Render the injected fields of ``instance`` as a tree.

    Objects reached a second time are marked ``(shared)`` and not expanded
    again; injectable fields left empty are marked ``(unset)``.

    Example:
        StartingService
        ├── repository: SqlRepository
        │   └── connection: Connection
        └── cache: (unset)
    """
    if instance is None:
        return "(none)"

    lines = [type(instance).__qualname__]
    _render_fields(factory, instance, "", {id(instance)}, lines)
    return "\n".join(lines)


def _render_fields(
    factory: "ObjectFactory",
    instance: Any,
    prefix: str,
    seen: Set[int],
    lines: List[str],
) -> None:
    descriptors = factory.inspector.injectable_fields(type(instance), factory.markers)
    for i, descriptor in enumerate(descriptors):
        is_last = i == len(descriptors) - 1
        branch = "└── " if is_last else "├── "
        value = _field_value(instance, descriptor.name)

        if value is None:
            lines.append(f"{prefix}{branch}{descriptor.name}: (unset)")
            continue

        label = f"{prefix}{branch}{descriptor.name}: {type(value).__qualname__}"
        if id(value) in seen:
            lines.append(f"{label} (shared)")
            continue

        seen.add(id(value))
        lines.append(label)
        _render_fields(factory, value, prefix + ("    " if is_last else "│   "), seen, lines)
