"""
Interface resolution: override precedence, negative caching, ambiguity.
"""

from abc import ABC, abstractmethod
from typing import Annotated, Optional

import pytest

from instantiator import AmbiguousBindingError, FactoryEventType, Inject, StaticDiscovery
from instantiator.caches import InstanceCache, MissingImplementations
from instantiator.registry import BindingRegistry
from instantiator.resolution import Resolver


class Notifier(ABC):
    @abstractmethod
    def notify(self, message: str) -> None:
        ...


class EmailNotifier(Notifier):
    def notify(self, message: str) -> None:
        pass


class SmsNotifier(Notifier):
    def notify(self, message: str) -> None:
        pass


class Storage(ABC):
    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        ...


class DiskStorage(Storage):
    def put(self, key: str, value: bytes) -> None:
        pass


class Signup:
    notifier: Annotated[Optional[Notifier], Inject()] = None


class Upload:
    storage: Annotated[Optional[Storage], Inject()] = None


class OtherUpload:
    storage: Annotated[Optional[Storage], Inject()] = None


def make_resolver(*classes):
    instances = InstanceCache()
    missing = MissingImplementations()
    registry = BindingRegistry(instances, missing)
    discovery = StaticDiscovery(classes)
    return Resolver(registry, missing, discovery), registry, missing


# ============================================================================
# Resolver
# ============================================================================

class TestResolver:

    def test_single_implementation(self):
        resolver, _, _ = make_resolver(EmailNotifier, DiskStorage)
        assert resolver.resolve(Notifier) is EmailNotifier

    def test_no_implementation_is_remembered(self):
        resolver, _, missing = make_resolver(DiskStorage)

        assert resolver.resolve(Notifier) is None
        assert Notifier in missing

    def test_several_implementations_raise(self):
        resolver, _, _ = make_resolver(EmailNotifier, SmsNotifier)

        with pytest.raises(AmbiguousBindingError) as exc_info:
            resolver.resolve(Notifier)
        assert exc_info.value.candidates == [EmailNotifier, SmsNotifier]

    def test_user_binding_wins_over_ambiguity(self):
        resolver, registry, _ = make_resolver(EmailNotifier, SmsNotifier)
        registry.set_implementing_class(Notifier, SmsNotifier)

        assert resolver.resolve(Notifier) is SmsNotifier

    def test_user_binding_wins_over_single_discovery(self):
        resolver, registry, _ = make_resolver(EmailNotifier, SmsNotifier)
        registry.set_implementing_class(Notifier, SmsNotifier)

        # Discovery would be ambiguous, so reaching it would raise
        for _ in range(3):
            assert resolver.resolve(Notifier) is SmsNotifier

    def test_binding_clears_negative_result(self):
        resolver, registry, missing = make_resolver()
        assert resolver.resolve(Notifier) is None

        registry.set_implementing_class(Notifier, EmailNotifier)
        assert Notifier not in missing
        assert resolver.resolve(Notifier) is EmailNotifier


# ============================================================================
# Negative cache through the factory
# ============================================================================

class TestNegativeCache:

    def test_discovery_runs_once_for_missing_interface(self, static_factory, counting_discovery):
        assert static_factory.obtain(Upload).storage is None
        assert static_factory.obtain(OtherUpload).storage is None

        assert counting_discovery.lookups[Storage] == 1

    def test_missing_implementation_is_silent(self, static_factory, recording_listener):
        static_factory.obtain(Upload)

        missing = recording_listener.of_type(FactoryEventType.MISSING_IMPLEMENTATION)
        assert [e.token for e in missing] == [Storage]
        assert recording_listener.of_type(FactoryEventType.CONSTRUCTION_FAILURE) == []

    def test_registering_late_does_not_bring_back_missing(self, static_factory, counting_discovery):
        static_factory.obtain(Upload)
        counting_discovery.register(DiskStorage)

        # Still memoized: the implementation appeared without a binding
        assert static_factory.obtain(OtherUpload).storage is None
        assert counting_discovery.lookups[Storage] == 1

    def test_binding_after_negative_result(self, static_factory, counting_discovery):
        static_factory.obtain(Upload)
        static_factory.set_implementing_class(Storage, DiskStorage)

        assert isinstance(static_factory.obtain(OtherUpload).storage, DiskStorage)
        assert counting_discovery.lookups[Storage] == 1

    def test_ambiguity_is_not_memoized(self, static_factory, counting_discovery):
        counting_discovery.register(EmailNotifier, SmsNotifier)

        with pytest.raises(AmbiguousBindingError):
            static_factory.obtain(Signup)

        static_factory.set_implementing_class(Notifier, EmailNotifier)
        signup = static_factory.obtain(Signup)
        # Signup was cached before the failing field; the binding fills new graphs only
        assert signup.notifier is None
        assert counting_discovery.lookups[Notifier] == 1

    def test_ambiguity_event(self, static_factory, counting_discovery, recording_listener):
        counting_discovery.register(EmailNotifier, SmsNotifier)

        with pytest.raises(AmbiguousBindingError):
            static_factory.obtain(Signup)

        events = recording_listener.of_type(FactoryEventType.AMBIGUOUS_BINDING)
        assert len(events) == 1
        assert events[0].token is Notifier
