from abc import ABC, abstractmethod


class FirstInterface(ABC):
    @abstractmethod
    def first(self) -> str:
        ...


class SecondInterface(FirstInterface):
    @abstractmethod
    def second(self) -> str:
        ...
