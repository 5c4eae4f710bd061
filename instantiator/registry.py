"""
Binding registry.

User-declared overrides consulted before automatic discovery:

- instance bindings: a type maps to a ready-made object
- class bindings: an interface maps to the concrete class to construct

Every registration is validated before anything is stored, so a rejected
registration leaves the registry unchanged.
"""

import logging
from typing import Any, Dict, Optional

from .caches import InstanceCache, MissingImplementations
from .diagnostics import FactoryDiagnostics, FactoryEventType
from .errors import InvalidArgumentError, type_name
from .introspection import conforms, is_assignable, is_interface

logger = logging.getLogger("instantiator.registry")


class BindingRegistry:
    """
    Overrides for one factory.

    Instance bindings are stored in the factory's ``InstanceCache``, so a
    bound object is also the cached instance for its type. Any binding for
    an interface clears it from the negative cache.
    """

    def __init__(
        self,
        instances: InstanceCache,
        missing: MissingImplementations,
        diagnostics: Optional[FactoryDiagnostics] = None,
    ):
        self._instances = instances
        self._missing = missing
        self._diagnostics = diagnostics or FactoryDiagnostics()
        self._implementations: Dict[type, type] = {}

    @property
    def implementations(self) -> Dict[type, type]:
        """Interface to implementing class bindings."""
        return dict(self._implementations)

    def implementation_for(self, interface: type) -> Optional[type]:
        return self._implementations.get(interface)

    def instance_for(self, tp: Any) -> Optional[Any]:
        return self._instances.get(tp)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def set_implementation(self, tp: type, instance: Any) -> None:
        """
        Use ``instance`` wherever ``tp`` is requested.

        For an interface this also binds the interface to the instance's
        class and registers the instance under that class.

        Raises:
            InvalidArgumentError: If ``instance`` is not a ``tp``
        """
        self._check_instance(tp, instance)

        if is_interface(tp):
            self._bind_class(tp, type(instance))
            self._bind_instance(type(instance), instance)
        self._bind_instance(tp, instance)

    def set_implementing_class(self, interface: type, implementation: type) -> None:
        """
        Construct ``implementation`` wherever ``interface`` is requested.

        Raises:
            InvalidArgumentError: If ``interface`` is not an interface,
                ``implementation`` is an interface, or ``implementation``
                does not implement ``interface``
        """
        if not is_interface(interface):
            raise InvalidArgumentError(
                f"First parameter must be an interface, got {type_name(interface)}",
                interface=interface,
                implementation=implementation,
            )
        if not isinstance(implementation, type) or is_interface(implementation):
            raise InvalidArgumentError(
                f"Second parameter must be a concrete class, got {type_name(implementation)}",
                interface=interface,
                implementation=implementation,
            )
        if not is_assignable(interface, implementation):
            raise InvalidArgumentError(
                f"{type_name(implementation)} does not implement {type_name(interface)}",
                interface=interface,
                implementation=implementation,
            )
        self._bind_class(interface, implementation)

    def set_mock(self, tp: type, mock: Any) -> None:
        """
        Substitute ``mock`` for ``tp`` in every graph built afterwards.

        ``tp`` is treated as an interface whose implementation is the mock's
        own class; the mock is registered for that class and for ``tp``.
        ``unittest.mock`` objects created with ``spec=tp`` qualify.

        Raises:
            InvalidArgumentError: If ``mock`` does not pass ``isinstance(mock, tp)``
        """
        self._check_instance(tp, mock)

        self._bind_class(tp, type(mock))
        self._bind_instance(type(mock), mock)
        self._bind_instance(tp, mock)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_instance(self, tp: Any, instance: Any) -> None:
        if not isinstance(tp, type):
            raise InvalidArgumentError(f"A class must be passed, got {tp!r}", interface=tp)
        if instance is None:
            raise InvalidArgumentError(
                f"An instance must be passed for {type_name(tp)}, got None",
                interface=tp,
            )
        if not conforms(instance, tp):
            raise InvalidArgumentError(
                f"{type(instance).__name__} instance is not a {type_name(tp)}",
                interface=tp,
                implementation=type(instance),
            )

    def _bind_class(self, interface: type, implementation: type) -> None:
        self._implementations[interface] = implementation
        self._missing.discard(interface)
        logger.debug(f"Bound {type_name(interface)} to class {type_name(implementation)}")
        self._diagnostics.emit(
            FactoryEventType.BINDING,
            token=interface,
            implementation=implementation,
            metadata={"binding": "class"},
        )

    def _bind_instance(self, tp: type, instance: Any) -> None:
        self._instances.put(tp, instance)
        self._missing.discard(tp)
        logger.debug(f"Bound {type_name(tp)} to instance of {type(instance).__name__}")
        self._diagnostics.emit(
            FactoryEventType.BINDING,
            token=tp,
            implementation=type(instance),
            metadata={"binding": "instance"},
        )
