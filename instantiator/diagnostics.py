"""
Factory Diagnostics - Observability and event tracking for object factories.
"""

import dataclasses
import logging
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger("instantiator.diagnostics")


class FactoryEventType(Enum):
    """Types of factory events."""
    BINDING = "binding"
    CONSTRUCTION = "construction"
    CONSTRUCTION_FAILURE = "construction_failure"
    INJECTION = "injection"
    ASSIGNMENT_FAILURE = "assignment_failure"
    DISCOVERY = "discovery"
    MISSING_IMPLEMENTATION = "missing_implementation"
    AMBIGUOUS_BINDING = "ambiguous_binding"


@dataclasses.dataclass
class FactoryEvent:
    """A diagnostic event emitted by a factory."""
    type: FactoryEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    token: Optional[Any] = None
    field: Optional[str] = None
    implementation: Optional[Any] = None
    error: Optional[Exception] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for factory diagnostic listeners."""
    def on_event(self, event: FactoryEvent) -> None:
        """Called when a factory event occurs."""
        ...


class LoggingDiagnosticListener:
    """Diagnostic listener that writes every event to the logging system."""
    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: FactoryEvent) -> None:
        if event.type == FactoryEventType.BINDING:
            logger.log(self.log_level, f"Bound {event.token} -> {event.implementation}")
        elif event.type == FactoryEventType.CONSTRUCTION:
            logger.log(self.log_level, f"Constructed {event.token}")
        elif event.type == FactoryEventType.INJECTION:
            logger.log(self.log_level, f"Injected {event.field} with {event.implementation}")
        elif event.type == FactoryEventType.DISCOVERY:
            found = event.metadata.get("candidates", [])
            logger.log(self.log_level, f"Discovered {len(found)} implementation(s) of {event.token}")
        elif event.type == FactoryEventType.MISSING_IMPLEMENTATION:
            logger.log(self.log_level, f"No implementation of {event.token}")
        elif event.type in (
            FactoryEventType.CONSTRUCTION_FAILURE,
            FactoryEventType.ASSIGNMENT_FAILURE,
            FactoryEventType.AMBIGUOUS_BINDING,
        ):
            logger.log(logging.ERROR, f"{event.type.value}: {event.error}")


class FactoryDiagnostics:
    """Coordinator for factory diagnostic listeners."""
    def __init__(self, listeners: Optional[List[DiagnosticListener]] = None):
        self._listeners: List[DiagnosticListener] = list(listeners or [])

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def remove_listener(self, listener: DiagnosticListener) -> None:
        """Remove a previously added listener."""
        self._listeners.remove(listener)

    def emit(self, event_type: FactoryEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = FactoryEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                # A broken listener must not break a graph build
                logger.error(f"Diagnostic listener error: {e}")
