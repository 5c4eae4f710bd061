from typing import Annotated, Optional

from instantiator import Inject
from testmodel.noimpl import HaveNoImplementation


class StartingServiceWithInterfaceWithNoImplementation:
    bean: Annotated[Optional[HaveNoImplementation], Inject()] = None
