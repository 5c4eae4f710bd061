"""
Config system - factory configuration from files and the environment.

Merge precedence (later overrides earlier):
defaults < config file (YAML/JSON) < .env file < environment variables < overrides
"""

import importlib
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

from dotenv import dotenv_values

from .discovery import LookupContext, PackageScope

logger = logging.getLogger("instantiator.config")

_TRUE = ("true", "yes", "1", "on")
_FALSE = ("false", "no", "0", "off")


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


def import_object(path: str) -> Any:
    """
    Import an object from ``"package.module:Name"`` or ``"package.module.Name"``.

    Raises:
        ConfigError: If the module or attribute cannot be found
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ConfigError(f"Invalid import path '{path}', expected 'module:Name'")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Could not import module '{module_name}': {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ConfigError(f"Module '{module_name}' has no attribute '{attr_path}'") from e
    return obj


@dataclass
class FactoryConfig:
    """Settings for building an ``ObjectFactory``."""

    scope: str = PackageScope.PACKAGE.value
    package: Optional[str] = None
    markers: List[str] = field(default_factory=list)
    check_assignments: bool = True
    scan_exclude: List[str] = field(default_factory=list)

    def __post_init__(self):
        valid = [s.value for s in PackageScope]
        if self.scope not in valid:
            raise ConfigError(f"Invalid scope '{self.scope}', expected one of {valid}")

    def lookup_context(self) -> LookupContext:
        return LookupContext(scope=PackageScope(self.scope), package=self.package or None)

    def marker_kinds(self) -> Optional[FrozenSet[type]]:
        """Configured marker kinds, or None for the default set."""
        if not self.markers:
            return None
        kinds = set()
        for path in self.markers:
            kind = import_object(path)
            if not isinstance(kind, type):
                raise ConfigError(f"Marker '{path}' is not a class")
            kinds.add(kind)
        return frozenset(kinds)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfigLoader:
    """Loads and merges ``FactoryConfig`` data from several sources."""

    def __init__(self, env_prefix: str = "INSTANTIATOR_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        path: Optional[str] = None,
        env_file: Optional[str] = None,
        env_prefix: str = "INSTANTIATOR_",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> FactoryConfig:
        """
        Load configuration with proper merge strategy.

        Args:
            path: Optional YAML or JSON config file
            env_file: Optional .env file
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated FactoryConfig

        Raises:
            ConfigError: On unreadable files, unknown keys or invalid values
        """
        loader = cls(env_prefix=env_prefix)

        if path:
            loader._load_file(Path(path))
        if env_file:
            loader._load_env_file(env_file)
        loader._load_from_env(os.environ)
        if overrides:
            loader.config_data.update({k: v for k, v in overrides.items() if v is not None})

        return loader.build()

    def build(self) -> FactoryConfig:
        known = {f.name for f in fields(FactoryConfig)}
        unknown = set(self.config_data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

        data = dict(self.config_data)
        for key in ("markers", "scan_exclude"):
            if key in data:
                data[key] = self._parse_list(data[key])
        if "check_assignments" in data:
            data["check_assignments"] = self._parse_bool(data["check_assignments"])

        return FactoryConfig(**data)

    def _load_file(self, path: Path):
        """Load config from a YAML or JSON file."""
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        with open(path) as f:
            if path.suffix in (".yaml", ".yml"):
                import yaml
                data = yaml.safe_load(f)
            elif path.suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigError(f"Unsupported config file type: {path.suffix}")

        if not data:
            return
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        # Allow a dedicated section in a shared file
        data = data.get("instantiator", data)
        self.config_data.update(data)
        logger.debug(f"Loaded config from {path}")

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        if not Path(path).exists():
            logger.debug(f"No .env file at {path}")
            return
        self._load_from_env(dotenv_values(path))

    def _load_from_env(self, environ):
        """Load prefixed variables (INSTANTIATOR_SCOPE -> scope)."""
        for key, value in environ.items():
            if key.startswith(self.env_prefix) and value is not None:
                self.config_data[key[len(self.env_prefix):].lower()] = value

    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigError(f"Invalid boolean value '{value}'")

    def _parse_list(self, value: Any) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        raise ConfigError(f"Invalid list value '{value}'")
