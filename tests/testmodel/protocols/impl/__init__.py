from typing import Annotated, Optional

from instantiator import Inject
from testmodel.protocols import Clock, Greeter


class EnglishGreeter:
    def greet(self, name: str) -> str:
        return f"Hello {name}"


class FixedClock:
    timezone: str = "UTC"

    def now(self) -> float:
        return 0.0


class GreetingService:
    greeter: Annotated[Optional[Greeter], Inject()] = None
    clock: Annotated[Optional[Clock], Inject()] = None
