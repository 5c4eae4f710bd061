"""Shared nodes and cycles."""

from __future__ import annotations

from typing import Annotated, ClassVar

from instantiator import Inject


class Repository:
    pass


class ServiceA:
    repository: Annotated[Repository, Inject()]


class ServiceB:
    repository: Annotated[Repository, Inject()]


class Root:
    a: Annotated[ServiceA, Inject()]
    b: Annotated[ServiceB, Inject()]
    label: str = "root"
    registry: ClassVar[dict] = {}


class Left:
    right: Annotated[Right, Inject()]


class Right:
    left: Annotated[Left, Inject()]


class BaseHandler:
    repository: Annotated[Repository, Inject()]


class ChildHandler(BaseHandler):
    service: Annotated[ServiceA, Inject()]
