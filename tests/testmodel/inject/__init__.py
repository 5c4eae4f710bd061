"""Interfaces with one implementation each."""

from abc import ABC, abstractmethod


class DaoBean(ABC):
    @abstractmethod
    def find(self, key: str) -> str:
        ...


class ServiceBean(ABC):
    @abstractmethod
    def get_dao_class(self):
        ...

    @abstractmethod
    def get_dao_interface(self):
        ...
