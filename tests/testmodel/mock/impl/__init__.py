from typing import Annotated

from instantiator import Inject
from testmodel.mock import ServiceMockBean


class RealServiceMockBean(ServiceMockBean):
    def get_string(self) -> str:
        return "Real String"


class StartingServiceWithMock:
    bean: Annotated[ServiceMockBean, Inject()]
