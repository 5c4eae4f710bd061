"""
Instantiator - object graph construction for tests and lightweight wiring.

Builds fully initialized instances by injecting annotated fields, without
running an application container.

Key Features:
- Field injection driven by ``Annotated[T, Inject()]`` markers
- Custom marker kinds
- Interface resolution by package scanning, with negative caching
- User overrides: instances, implementing classes and mocks
- One cached instance per class per factory

Example:
    class SignupService:
        mailer: Annotated[Mailer, Inject()]

    factory = ObjectFactory()
    factory.set_mock(Mailer, Mock(spec=Mailer))
    service = factory.obtain(SignupService)
"""

__version__ = "0.1.0"

from .markers import (
    Inject,
    inject,
    DEFAULT_MARKERS,
)

from .errors import (
    InstantiatorError,
    InvalidRequestError,
    InvalidArgumentError,
    AmbiguousBindingError,
    ConstructionError,
    AssignmentError,
)

from .introspection import (
    FieldDescriptor,
    FieldInspector,
    is_interface,
    is_assignable,
)

from .discovery import (
    PackageScope,
    LookupContext,
    TypeDiscovery,
    ScanningDiscovery,
    StaticDiscovery,
)

from .scanner import PackageScanner

from .diagnostics import (
    FactoryDiagnostics,
    FactoryEvent,
    FactoryEventType,
    LoggingDiagnosticListener,
)

from .config import (
    ConfigError,
    ConfigLoader,
    FactoryConfig,
)

from .factory import ObjectFactory

from .graph import render_tree

__all__ = [
    # Markers
    "Inject",
    "inject",
    "DEFAULT_MARKERS",

    # Errors
    "InstantiatorError",
    "InvalidRequestError",
    "InvalidArgumentError",
    "AmbiguousBindingError",
    "ConstructionError",
    "AssignmentError",

    # Introspection
    "FieldDescriptor",
    "FieldInspector",
    "is_interface",
    "is_assignable",

    # Discovery
    "PackageScope",
    "LookupContext",
    "TypeDiscovery",
    "ScanningDiscovery",
    "StaticDiscovery",
    "PackageScanner",

    # Diagnostics
    "FactoryDiagnostics",
    "FactoryEvent",
    "FactoryEventType",
    "LoggingDiagnosticListener",

    # Config
    "ConfigError",
    "ConfigLoader",
    "FactoryConfig",

    # Factory
    "ObjectFactory",
    "render_tree",
]
