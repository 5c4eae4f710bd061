"""Structural interfaces."""

from typing import Protocol


class Greeter(Protocol):
    def greet(self, name: str) -> str:
        ...


class Clock(Protocol):
    timezone: str

    def now(self) -> float:
        ...
