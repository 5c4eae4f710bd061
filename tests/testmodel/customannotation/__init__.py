from typing import Annotated, Optional

from instantiator import Inject
from testmodel.inject import ServiceBean


class MyInjectionAnnotation:
    pass


class StartingServiceWithCustomAnnotation:
    bean: Annotated[Optional[ServiceBean], MyInjectionAnnotation()] = None
    will_not_be_injected: Annotated[Optional[ServiceBean], Inject()] = None
