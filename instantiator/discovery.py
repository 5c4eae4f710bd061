"""
Implementation discovery.

Finds the concrete classes implementing an interface within a lookup
scope. The factory only depends on the ``TypeDiscovery`` protocol, so
scanning can be swapped for a manual registry in tests or in code that
registers its implementations up front.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Set, runtime_checkable

from .introspection import is_assignable, is_interface
from .scanner import PackageScanner

logger = logging.getLogger("instantiator.discovery")

# Scope key for "every loaded module"
LOADED_SCOPE = "*"


class PackageScope(str, Enum):
    """Where implementations of an interface are looked up."""

    PACKAGE = "package"  # The interface's package and its sub-packages
    LOADED = "loaded"    # Every module already imported


def package_of(cls: type) -> str:
    """
    Package an interface belongs to.

    A class defined in a package ``__init__`` belongs to that package, a
    class defined in a plain module to the module's parent package. A
    top-level module is its own scope.
    """
    module_name = cls.__module__
    module = sys.modules.get(module_name)
    if module is not None and hasattr(module, "__path__"):
        return module_name
    return module_name.rpartition(".")[0] or module_name


@dataclass(frozen=True)
class LookupContext:
    """
    Selects the scope searched for implementations.

    Examples:
        LookupContext()                         # interface's own package
        LookupContext(PackageScope.LOADED)      # all imported modules
        LookupContext(package="myapp.services") # one fixed package
    """

    scope: PackageScope = PackageScope.PACKAGE
    package: Optional[str] = None

    def scope_for(self, interface: type) -> str:
        """Scope key to search for implementations of ``interface``."""
        if self.package:
            return self.package
        if self.scope is PackageScope.LOADED:
            return LOADED_SCOPE
        return package_of(interface)


def implementations_in(classes: Iterable[type], interface: type) -> Set[type]:
    """Concrete classes among ``classes`` that can stand in for ``interface``."""
    return {
        cls for cls in classes
        if cls is not interface and not is_interface(cls) and is_assignable(interface, cls)
    }


@runtime_checkable
class TypeDiscovery(Protocol):
    """Lists concrete implementers of an interface."""

    def find_implementations(self, interface: type) -> Set[type]:
        ...


class TypeIndex:
    """
    Classes defined within one scope.

    The scope is scanned on first query and the result kept for the
    lifetime of the index.
    """

    def __init__(self, scope: str, scanner: PackageScanner):
        self.scope = scope
        self._scanner = scanner
        self._classes: Optional[List[type]] = None

    @property
    def classes(self) -> List[type]:
        if self._classes is None:
            if self.scope == LOADED_SCOPE:
                self._classes = self._scanner.scan_loaded()
            else:
                self._classes = self._scanner.scan_package(self.scope)
            logger.debug(f"Indexed {len(self._classes)} classes in scope {self.scope}")
        return self._classes

    def implementations_of(self, interface: type) -> Set[type]:
        return implementations_in(self.classes, interface)


class ScanningDiscovery:
    """
    Discovery by package scanning.

    One ``TypeIndex`` is kept per scope so each scope is scanned at most
    once per discovery instance.
    """

    def __init__(
        self,
        lookup_context: Optional[LookupContext] = None,
        scanner: Optional[PackageScanner] = None,
    ):
        self.lookup_context = lookup_context or LookupContext()
        self._scanner = scanner or PackageScanner()
        self._indexes: Dict[str, TypeIndex] = {}

    @property
    def scanned_scopes(self) -> List[str]:
        return list(self._indexes)

    def index_for(self, scope: str) -> TypeIndex:
        index = self._indexes.get(scope)
        if index is None:
            index = TypeIndex(scope, self._scanner)
            self._indexes[scope] = index
        return index

    def find_implementations(self, interface: type) -> Set[type]:
        scope = self.lookup_context.scope_for(interface)
        return self.index_for(scope).implementations_of(interface)


class StaticDiscovery:
    """
    Discovery over explicitly registered classes.

    Example:
        discovery = StaticDiscovery()

        @discovery.register
        class SqlUserRepository(UserRepository):
            ...
    """

    def __init__(self, classes: Iterable[type] = ()):
        self._classes: List[type] = []
        for cls in classes:
            self.register(cls)

    def register(self, *classes: type):
        """Register classes; returns the first one so it can be used as a decorator."""
        for cls in classes:
            if cls not in self._classes:
                self._classes.append(cls)
        return classes[0] if classes else None

    def find_implementations(self, interface: type) -> Set[type]:
        return implementations_in(self._classes, interface)
