"""Classes the factory cannot build or wire completely."""

from typing import Annotated, Optional

from instantiator import Inject
from testmodel.graph import Repository


class NeedsArgument:
    def __init__(self, value):
        self.value = value


class Exploding:
    def __init__(self):
        raise RuntimeError("boom")


class Holder:
    needs: Annotated[Optional[NeedsArgument], Inject()] = None
    exploding: Annotated[Optional[Exploding], Inject()] = None
    repository: Annotated[Optional[Repository], Inject()] = None


class Slotted:
    __slots__ = ("other",)

    repository: Annotated[Repository, Inject()]


class Frozen:
    repository: Annotated[Optional[Repository], Inject()] = None

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")
