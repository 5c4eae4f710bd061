from typing import Annotated, Optional

from instantiator import Inject
from testmodel.multilevelinterface import FirstInterface, SecondInterface


class MultiLevelInterfaceImplementation(SecondInterface):
    def first(self) -> str:
        return "first"

    def second(self) -> str:
        return "second"


class MultiLevelInterfaceService:
    first_interface: Annotated[Optional[FirstInterface], Inject()] = None
