"""
Testing utilities.

Pytest fixtures giving each test its own factory. Import them in your
``conftest.py``::

    from instantiator.testing import object_factory, recording_listener  # noqa: F401
"""

from typing import List

import pytest

from .diagnostics import FactoryEvent, FactoryEventType
from .factory import ObjectFactory


class RecordingListener:
    """Diagnostic listener that keeps every event for assertions."""

    def __init__(self):
        self.events: List[FactoryEvent] = []

    def on_event(self, event: FactoryEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: FactoryEventType) -> List[FactoryEvent]:
        return [e for e in self.events if e.type == event_type]

    def reset(self) -> None:
        self.events.clear()


@pytest.fixture
def recording_listener():
    """A fresh :class:`RecordingListener`."""
    return RecordingListener()


@pytest.fixture
def object_factory(recording_listener):
    """An isolated factory reporting to ``recording_listener``."""
    factory = ObjectFactory()
    factory.diagnostics.add_listener(recording_listener)
    return factory
