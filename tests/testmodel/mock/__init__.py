from abc import ABC, abstractmethod


class ServiceMockBean(ABC):
    @abstractmethod
    def get_string(self) -> str:
        ...
