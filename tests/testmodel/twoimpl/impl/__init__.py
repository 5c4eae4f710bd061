from typing import Annotated, Optional

from instantiator import Inject
from testmodel.twoimpl import HaveTwoImplementationsBean


class Implementation1(HaveTwoImplementationsBean):
    def name(self) -> str:
        return "one"


class Implementation2(HaveTwoImplementationsBean):
    def name(self) -> str:
        return "two"


class StartingServiceWithInterfaceWithTwoImplementations:
    bean: Annotated[Optional[HaveTwoImplementationsBean], Inject()] = None
