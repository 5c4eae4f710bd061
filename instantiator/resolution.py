"""
Interface resolution.

Chooses the concrete class to construct for an interface. Precedence,
first match wins:

1. class binding registered by the user
2. negative cache (no implementation was found before)
3. discovery: exactly one implementation is used, none is remembered in
   the negative cache, several raise ``AmbiguousBindingError``
"""

import logging
from typing import Optional

from .caches import MissingImplementations
from .diagnostics import FactoryDiagnostics, FactoryEventType
from .discovery import TypeDiscovery
from .errors import AmbiguousBindingError, type_name
from .registry import BindingRegistry

logger = logging.getLogger("instantiator.resolution")


class Resolver:
    """Maps interfaces to implementing classes for one factory."""

    def __init__(
        self,
        registry: BindingRegistry,
        missing: MissingImplementations,
        discovery: TypeDiscovery,
        diagnostics: Optional[FactoryDiagnostics] = None,
    ):
        self._registry = registry
        self._missing = missing
        self._discovery = discovery
        self._diagnostics = diagnostics or FactoryDiagnostics()

    def resolve(self, interface: type) -> Optional[type]:
        """
        Resolve ``interface`` to a concrete class.

        Returns:
            The class to construct, or None if no implementation exists

        Raises:
            AmbiguousBindingError: If discovery finds several implementations
                and no binding chooses one
        """
        implementation = self._registry.implementation_for(interface)
        if implementation is not None:
            logger.debug(f"Using user-set implementation {type_name(implementation)}")
            return implementation

        if interface in self._missing:
            logger.debug(f"Not looking again for missing implementation of {type_name(interface)}")
            return None

        candidates = self._discovery.find_implementations(interface)
        logger.debug(f"Found implementations of {type_name(interface)}: {sorted(map(type_name, candidates))}")
        self._diagnostics.emit(
            FactoryEventType.DISCOVERY,
            token=interface,
            metadata={"candidates": sorted(candidates, key=type_name)},
        )

        if len(candidates) == 1:
            return next(iter(candidates))

        if not candidates:
            logger.debug(f"No implementation found for {type_name(interface)}")
            self._missing.add(interface)
            self._diagnostics.emit(FactoryEventType.MISSING_IMPLEMENTATION, token=interface)
            return None

        error = AmbiguousBindingError(interface, candidates)
        self._diagnostics.emit(FactoryEventType.AMBIGUOUS_BINDING, token=interface, error=error)
        raise error
