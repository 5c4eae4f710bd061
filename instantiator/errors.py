"""
Instantiator error types with rich diagnostics.

Only configuration misuse (``InvalidRequestError``, ``InvalidArgumentError``,
``AmbiguousBindingError``) propagates out of a graph build. Construction and
assignment failures are raised by the capability adapters and recovered by
the factory.
"""

from typing import Any, Iterable, List, Optional


def type_name(tp: Any) -> str:
    """Dotted name of a type for messages."""
    if isinstance(tp, type):
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


class InstantiatorError(Exception):
    """Base exception for instantiator errors."""
    pass


class InvalidRequestError(InstantiatorError):
    """An interface type was requested as a construction target."""

    def __init__(self, requested: Any):
        self.requested = requested

        msg = (
            f"Cannot obtain an instance of interface {type_name(requested)}: "
            f"a concrete class must be passed"
            f"\n\nSuggested fixes:"
            f"\n  - Request a concrete implementation of {type_name(requested)}"
            f"\n  - Inject the interface into a field of a concrete class instead"
        )
        super().__init__(msg)


class InvalidArgumentError(InstantiatorError):
    """A binding registration was rejected."""

    def __init__(self, message: str, *, interface: Any = None, implementation: Any = None):
        self.interface = interface
        self.implementation = implementation
        super().__init__(message)


class AmbiguousBindingError(InstantiatorError):
    """Discovery found more than one implementation and no binding chooses one."""

    def __init__(self, interface: type, candidates: Iterable[type]):
        self.interface = interface
        self.candidates: List[type] = sorted(candidates, key=type_name)

        msg = f"More than one implementation found for {type_name(interface)}:"
        for candidate in self.candidates:
            msg += f"\n  - {type_name(candidate)}"

        msg += "\n\nSuggested fixes:"
        msg += "\n  - Choose one with factory.set_implementing_class(interface, implementation)"
        msg += "\n  - Provide an object with factory.set_implementation(interface, instance)"
        super().__init__(msg)


class ConstructionError(InstantiatorError):
    """Default construction of a class failed."""

    def __init__(self, cls: type, cause: Optional[BaseException] = None):
        self.cls = cls
        self.cause = cause

        msg = f"Could not instantiate class {type_name(cls)}"
        if cause is not None:
            msg += f": {type(cause).__name__}: {cause}"
        super().__init__(msg)


class AssignmentError(InstantiatorError):
    """A field of an instance could not be set."""

    def __init__(
        self,
        owner: type,
        field_name: str,
        value: Any,
        cause: Optional[BaseException] = None,
        reason: Optional[str] = None,
    ):
        self.owner = owner
        self.field_name = field_name
        self.value = value
        self.cause = cause

        msg = f"Could not set field {type_name(owner)}.{field_name} to {type(value).__name__} instance"
        if reason:
            msg += f": {reason}"
        elif cause is not None:
            msg += f": {type(cause).__name__}: {cause}"
        super().__init__(msg)
