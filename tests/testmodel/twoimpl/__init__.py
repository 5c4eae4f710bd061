from abc import ABC, abstractmethod


class HaveTwoImplementationsBean(ABC):
    @abstractmethod
    def name(self) -> str:
        ...
