"""
model_types.py - Sample Domain Types Used by the Test Suite

Kept at module level (not inside test functions) so their annotations resolve
through `typing.get_type_hints`.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Generic, Optional, Protocol, TypeVar, runtime_checkable


class Widget:
    def __init__(self, size: int):
        self.size = size


class SimpleType:
    def __init__(self, text: str):
        self.text = text


@dataclass
class Customer:
    name: str
    born: date


@dataclass
class Order:
    customer: Customer
    total: Decimal
    placed: datetime
    note: Optional[str] = None


class MultiConstructor:
    """Several constructors; `from_single` and `also_single` tie for fewest parameters."""

    def __init__(self, a: int, b: int, c: int):
        self.values = (a, b, c)
        self.source = "init"

    @classmethod
    def from_pair(cls, a: int, b: int) -> "MultiConstructor":
        instance = cls(a, b, 0)
        instance.source = "from_pair"
        return instance

    @classmethod
    def from_single(cls, a: int) -> "MultiConstructor":
        instance = cls(a, 0, 0)
        instance.source = "from_single"
        return instance

    @classmethod
    def also_single(cls, b: int) -> "MultiConstructor":
        instance = cls(0, b, 0)
        instance.source = "also_single"
        return instance

    @classmethod
    def describe(cls) -> str:
        return cls.__name__


class WithDefaults:
    def __init__(self, required: int, optional: str = "default"):
        self.required = required
        self.optional = optional


class KeywordOnly:
    def __init__(self, *, name: str, count: int):
        self.name = name
        self.count = count


class Untyped:
    def __init__(self, value):
        self.value = value


class Empty:
    pass


class Node:
    def __init__(self, parent: "Node"):
        self.parent = parent


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


class Color(enum.Enum):
    RED = 1
    GREEN = 2
    BLUE = 3


T = TypeVar("T")


class Box(Generic[T]):
    def __init__(self, item: T):
        self.item = item


class Bag:
    def __init__(self):
        self._items = []

    def __iter__(self):
        return iter(self._items)


class Shape(ABC):
    @abstractmethod
    def area(self) -> float:
        ...


class Square(Shape):
    def __init__(self, side: float):
        self.side = side

    def area(self) -> float:
        return self.side * self.side


class Service(ABC):
    @abstractmethod
    def fetch(self, key: str) -> str:
        ...


class Consumer:
    def __init__(self, service: Service, retries: int):
        self.service = service
        self.retries = retries


@runtime_checkable
class Greeter(Protocol):
    def greet(self, name: str) -> str:
        ...


class Opaque:
    """Stands in for a class whose constructor cannot be inspected."""

    def __init__(self, value: int):
        self.value = value


class PartlyResolvable:
    def __init__(self, size: int, other: "Missing"):  # noqa: F821
        self.size = size
        self.other = other
