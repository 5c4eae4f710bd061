"""
Object factory.

Builds fully initialized object graphs without an application container:
the requested class is constructed with no arguments and every field
carrying an injection marker is populated, recursively.

    factory = ObjectFactory()
    factory.set_mock(Mailer, Mock(spec=Mailer))
    service = factory.obtain(SignupService)
"""

import logging
from typing import Any, Iterable, Optional, Type, TypeVar

from .caches import InstanceCache, MissingImplementations
from .config import FactoryConfig
from .diagnostics import FactoryDiagnostics, FactoryEventType
from .discovery import LookupContext, ScanningDiscovery, TypeDiscovery
from .errors import AssignmentError, ConstructionError, InvalidRequestError, type_name
from .introspection import (
    FieldDescriptor,
    FieldInspector,
    assign_field,
    construct,
    is_interface,
)
from .markers import normalize_markers
from .registry import BindingRegistry
from .resolution import Resolver
from .scanner import PackageScanner

logger = logging.getLogger("instantiator.factory")

T = TypeVar("T")


class ObjectFactory:
    """
    Creates and wires instances, one per class.

    Instances are cached before their fields are populated, so diamond
    shaped graphs share nodes and a dependency cycle closes onto the
    instance already under construction.

    Construction and assignment failures are logged and leave the
    affected field (or the requested root) unset. Requesting an interface
    and ambiguous discovery raise.

    A factory holds mutable caches and is not safe for concurrent use;
    give each thread (or test) its own factory.
    """

    def __init__(
        self,
        markers: Optional[Iterable[type]] = None,
        *,
        lookup_context: Optional[LookupContext] = None,
        discovery: Optional[TypeDiscovery] = None,
        diagnostics: Optional[FactoryDiagnostics] = None,
        inspector: Optional[FieldInspector] = None,
        check_assignments: bool = True,
    ):
        """
        Args:
            markers: Marker kinds that flag a field for injection
                (defaults to ``Inject``)
            lookup_context: Scope for implementation discovery; ignored
                when ``discovery`` is given
            discovery: Custom implementation discovery
            diagnostics: Diagnostics channel for factory events
            inspector: Field inspector (shareable between factories)
            check_assignments: Reject values that do not conform to the
                declared field type
        """
        self.markers = normalize_markers(markers)
        self.check_assignments = check_assignments
        self._diagnostics = diagnostics or FactoryDiagnostics()
        self._inspector = inspector or FieldInspector()
        self._discovery = discovery or ScanningDiscovery(lookup_context)

        self._instances = InstanceCache()
        self._missing = MissingImplementations()
        self._registry = BindingRegistry(self._instances, self._missing, self._diagnostics)
        self._resolver = Resolver(self._registry, self._missing, self._discovery, self._diagnostics)

    @classmethod
    def from_config(cls, config: FactoryConfig, **kwargs) -> "ObjectFactory":
        """Build a factory from a ``FactoryConfig``; ``kwargs`` override it."""
        kwargs.setdefault("check_assignments", config.check_assignments)
        kwargs.setdefault(
            "discovery",
            ScanningDiscovery(config.lookup_context(), PackageScanner(exclude=config.scan_exclude)),
        )
        return cls(config.marker_kinds(), **kwargs)

    @property
    def diagnostics(self) -> FactoryDiagnostics:
        return self._diagnostics

    @property
    def discovery(self) -> TypeDiscovery:
        return self._discovery

    @property
    def inspector(self) -> FieldInspector:
        return self._inspector

    @property
    def registry(self) -> BindingRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Graph construction
    # ------------------------------------------------------------------

    def obtain(self, cls: Optional[Type[T]]) -> Optional[T]:
        """
        Return the fully initialized instance of ``cls``.

        Instances are cached; every call for the same class returns the
        same object.

        Args:
            cls: Concrete class to instantiate; None yields None

        Returns:
            The instance, or None if ``cls`` could not be constructed

        Raises:
            InvalidRequestError: If ``cls`` is an interface
            AmbiguousBindingError: If an interface in the graph has several
                implementations and no binding
        """
        logger.debug(f"Processing: {type_name(cls)}")
        if cls is None:
            return None
        if is_interface(cls):
            raise InvalidRequestError(cls)

        if cls in self._instances:
            return self._instances.get(cls)

        try:
            instance = construct(cls)
        except ConstructionError as e:
            # Not cached: a binding registered later may still succeed
            logger.error(str(e))
            self._diagnostics.emit(FactoryEventType.CONSTRUCTION_FAILURE, token=cls, error=e)
            return None

        self._instances.put(cls, instance)
        self._diagnostics.emit(FactoryEventType.CONSTRUCTION, token=cls)

        for descriptor in self._inspector.injectable_fields(cls, self.markers):
            logger.debug(f"Trying to set '{descriptor.name}' of type: {descriptor.declared_type!r}")
            self.inject_field(instance, descriptor)

        return instance

    def inject_field(self, instance: Any, descriptor: FieldDescriptor) -> None:
        """
        Populate one field of ``instance``.

        A bound instance for the declared type is used verbatim. Otherwise
        an interface is resolved to a class and a concrete type is used as
        is; the value is then obtained through ``obtain``.
        """
        declared = descriptor.declared_type
        if not isinstance(declared, type):
            logger.warning(f"Cannot inject {descriptor}: declared type {declared!r} is not a class")
            return

        value = self._registry.instance_for(declared)
        if value is None:
            if is_interface(declared):
                implementation = self._resolver.resolve(declared)
                if implementation is None:
                    logger.debug(f"No implementation, leaving out: {descriptor}")
                    return
            else:
                implementation = declared
            value = self.obtain(implementation)

        if value is None:
            return

        try:
            assign_field(instance, descriptor, value, check_type=self.check_assignments)
        except AssignmentError as e:
            logger.error(str(e))
            self._diagnostics.emit(
                FactoryEventType.ASSIGNMENT_FAILURE,
                token=type(instance),
                field=descriptor.name,
                error=e,
            )
            return

        self._diagnostics.emit(
            FactoryEventType.INJECTION,
            token=type(instance),
            field=str(descriptor),
            implementation=type(value),
        )

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def set_implementation(self, tp: type, instance: Any) -> None:
        """
        Use ``instance`` wherever ``tp`` is injected.

        Overrides discovery for ``tp``; useful for injecting hand-made
        objects. For an interface the instance is also returned by
        ``obtain(type(instance))``.

        Raises:
            InvalidArgumentError: If ``instance`` is not a ``tp``
        """
        self._registry.set_implementation(tp, instance)

    def set_implementing_class(self, interface: type, implementation: type) -> None:
        """
        Construct ``implementation`` wherever ``interface`` is injected.

        Raises:
            InvalidArgumentError: If ``interface`` is not an interface or
                ``implementation`` is not a concrete implementer of it
        """
        self._registry.set_implementing_class(interface, implementation)

    def set_mock(self, tp: type, mock: Any) -> None:
        """
        Inject ``mock`` wherever ``tp`` is injected.

        Example:
            mailer = Mock(spec=Mailer)
            factory.set_mock(Mailer, mailer)

        Raises:
            InvalidArgumentError: If ``mock`` is not a ``tp``
        """
        self._registry.set_mock(tp, mock)
