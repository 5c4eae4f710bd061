from abc import ABC, abstractmethod


class HaveNoImplementation(ABC):
    @abstractmethod
    def run(self):
        ...
