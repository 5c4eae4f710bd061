"""
Package Scanner.

Runtime introspection to discover classes within packages. Used by
scanning discovery to find implementations of interfaces.
"""

import importlib
import inspect
import logging
import pkgutil
import sys
import time
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger("instantiator.scanner")


def _in_scope(module_name: str, root: str) -> bool:
    return module_name == root or module_name.startswith(root + ".")


class PackageScanner:
    """
    Scanner for discovering classes in Python packages.

    Features:
    - Safe importing with error handling
    - Recursive package scanning
    - Module exclusion by name pattern
    - Deduplication of classes re-exported by several modules
    - Scan statistics
    """

    def __init__(self, exclude: Sequence[str] = ()):
        self._exclude = tuple(pattern.lower() for pattern in exclude)
        self._scan_stats = {
            'scan_time': 0.0,
            'modules_scanned': 0,
            'classes_found': 0,
            'errors_encountered': 0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get scanning statistics."""
        return self._scan_stats.copy()

    def _excluded(self, module_name: str) -> bool:
        lowered = module_name.lower()
        return any(pattern in lowered for pattern in self._exclude)

    def scan_package(
        self,
        package_name: str,
        predicate: Optional[Callable[[type], bool]] = None,
        recursive: bool = True,
    ) -> List[type]:
        """
        Scan a package for classes defined inside it.

        Importing the package and its sub-modules runs their module-level
        code. Sub-modules that fail to import are logged and skipped.

        Args:
            package_name: Dotted python path (e.g. 'myapp.services')
            predicate: Optional filter on discovered classes
            recursive: Whether to scan sub-packages

        Returns:
            List of discovered classes, in discovery order
        """
        start_time = time.time()
        discovered: Dict[type, None] = {}

        try:
            module = importlib.import_module(package_name)
        except ImportError as e:
            # Not an error, the scope just has nothing to offer
            logger.debug(f"Could not import package {package_name}: {e}")
            return []

        self._scan_module(module, package_name, discovered, predicate)

        if recursive and hasattr(module, "__path__"):
            seen_modules = {module.__name__}

            for _, name, _ in pkgutil.walk_packages(
                module.__path__,
                module.__name__ + ".",
                onerror=lambda name: self._on_walk_error(name),
            ):
                if name in seen_modules or self._excluded(name):
                    continue
                seen_modules.add(name)

                try:
                    submodule = importlib.import_module(name)
                except Exception as e:
                    self._scan_stats['errors_encountered'] += 1
                    logger.debug(f"Failed to import submodule {name}: {e}")
                    continue

                self._scan_module(submodule, package_name, discovered, predicate)

        self._scan_stats['scan_time'] += time.time() - start_time
        return list(discovered)

    def scan_loaded(
        self,
        predicate: Optional[Callable[[type], bool]] = None,
    ) -> List[type]:
        """Scan every module already imported into the interpreter."""
        start_time = time.time()
        discovered: Dict[type, None] = {}

        for name, module in list(sys.modules.items()):
            if module is None or self._excluded(name):
                continue
            self._scan_module(module, name, discovered, predicate)

        self._scan_stats['scan_time'] += time.time() - start_time
        return list(discovered)

    def _on_walk_error(self, name: str) -> None:
        self._scan_stats['errors_encountered'] += 1
        logger.debug(f"Failed to walk package {name}")

    def _scan_module(
        self,
        module: ModuleType,
        root: str,
        discovered: Dict[type, None],
        predicate: Optional[Callable[[type], bool]],
    ) -> None:
        """Collect classes of ``module`` that are defined inside ``root``."""
        self._scan_stats['modules_scanned'] += 1
        try:
            members = inspect.getmembers(module, inspect.isclass)
        except Exception as e:
            self._scan_stats['errors_encountered'] += 1
            logger.warning(f"Error inspecting module {getattr(module, '__name__', root)}: {e}")
            return

        for _, obj in members:
            # Skip classes imported from outside the scanned scope
            if not _in_scope(getattr(obj, "__module__", "") or "", root):
                continue
            if predicate and not predicate(obj):
                continue
            if obj not in discovered:
                discovered[obj] = None
                self._scan_stats['classes_found'] += 1
