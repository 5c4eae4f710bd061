"""
Shared test fixtures and helpers for the instantiator test suite.
"""

import pytest

from instantiator import ObjectFactory, StaticDiscovery

# Import fixtures so pytest can discover them
from instantiator.testing import (  # noqa: F401
    object_factory,
    recording_listener,
)


class CountingDiscovery(StaticDiscovery):
    """Static discovery that counts lookups per interface."""

    def __init__(self, classes=()):
        super().__init__(classes)
        self.lookups = {}

    def find_implementations(self, interface):
        self.lookups[interface] = self.lookups.get(interface, 0) + 1
        return super().find_implementations(interface)


@pytest.fixture
def counting_discovery():
    return CountingDiscovery()


@pytest.fixture
def static_factory(counting_discovery, recording_listener):
    """Factory whose discovery only knows explicitly registered classes."""
    factory = ObjectFactory(discovery=counting_discovery)
    factory.diagnostics.add_listener(recording_listener)
    return factory
