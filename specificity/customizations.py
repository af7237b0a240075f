"""
customizations.py - Interceptors in the Type Resolution Pipeline

A customization gets a chance to produce a value for a requested type before
the factory falls back to default construction. Customizations are kept as a
stack: the most recently registered one is consulted first and each one
either returns `Handled(value)` or `NOT_HANDLED`, in which case the next
(older) customization is tried.

Built-in customizations cover typing constructs that have no constructor:
- UnionCustomization: ``Union[...]`` / ``Optional[...]`` / ``X | Y``
- LiteralCustomization: ``Literal[...]``
- EnumCustomization: ``enum.Enum`` subclasses

Example Usage:
-------------
    >>> from specificity import ObjectFactory, Handled, NOT_HANDLED
    >>>
    >>> class PositiveAmounts(Customization):
    ...     def try_get_any(self, type_, factory):
    ...         if type_ is Amount:
    ...             return Handled(Amount(factory.any_int(1, 1000)))
    ...         return NOT_HANDLED
    >>>
    >>> factory = ObjectFactory()
    >>> factory.customize(PositiveAmounts())
"""

from __future__ import annotations

import enum
import types
import typing
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Literal, Union, TYPE_CHECKING

from .types import Handled, NOT_HANDLED, describe_type

if TYPE_CHECKING:
    from .factory import ObjectFactory


_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))


# =============================================================================
# CUSTOMIZATION BASE
# =============================================================================

class Customization(ABC):
    """
    An interceptor that may produce a value for a requested type.

    Implementations may call back into `factory` for the parts of the value
    they do not want to build themselves; those nested requests go through the
    full resolution pipeline again.
    """

    @abstractmethod
    def try_get_any(self, type_: Any, factory: "ObjectFactory") -> Any:
        """
        Produce a value for `type_` or decline.

        Parameters
        ----------
        type_ : Any
            The requested type descriptor.
        factory : ObjectFactory
            The factory handling the request.

        Returns
        -------
        Handled or NOT_HANDLED
            ``Handled(value)`` to claim the request, ``NOT_HANDLED`` to pass
            it to the next customization.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FunctionCustomization(Customization):
    """Adapts a plain ``(type_, factory) -> result`` callable."""

    def __init__(self, func: Callable[[Any, "ObjectFactory"], Any]):
        self._func = func

    def try_get_any(self, type_: Any, factory: "ObjectFactory") -> Any:
        return self._func(type_, factory)

    def __repr__(self) -> str:
        name = getattr(self._func, "__qualname__", repr(self._func))
        return f"FunctionCustomization({name})"


def as_customization(customization: Any) -> Customization:
    """Accept a Customization or a compatible callable."""
    if isinstance(customization, Customization):
        return customization
    if callable(customization):
        return FunctionCustomization(customization)
    raise TypeError(
        f"Expected a Customization or callable, got {type(customization).__name__}"
    )


def run_customizations(
    type_: Any,
    factory: "ObjectFactory",
    customizations: Iterable[Customization]
) -> Any:
    """
    Consult `customizations` in order until one handles `type_`.

    Returns
    -------
    Handled or NOT_HANDLED
    """
    for customization in customizations:
        result = customization.try_get_any(type_, factory)
        if isinstance(result, Handled):
            return result
        if result is not NOT_HANDLED:
            raise TypeError(
                f"{customization!r} returned {result!r} for {describe_type(type_)}; "
                f"customizations must return Handled(value) or NOT_HANDLED"
            )
    return NOT_HANDLED


# =============================================================================
# BUILT-IN CUSTOMIZATIONS
# =============================================================================

class UnionCustomization(Customization):
    """
    Resolves a union by picking one member.

    ``None`` is only produced when it is the sole member, so optional
    parameters are populated.
    """

    def try_get_any(self, type_: Any, factory: "ObjectFactory") -> Any:
        if typing.get_origin(type_) not in _UNION_ORIGINS:
            return NOT_HANDLED

        members = [arg for arg in typing.get_args(type_) if arg is not type(None)]
        if not members:
            return Handled(None)
        return Handled(factory.any(factory.any_choice(members)))


class LiteralCustomization(Customization):
    def try_get_any(self, type_: Any, factory: "ObjectFactory") -> Any:
        if typing.get_origin(type_) is not Literal:
            return NOT_HANDLED
        return Handled(factory.any_choice(typing.get_args(type_)))


class EnumCustomization(Customization):
    def try_get_any(self, type_: Any, factory: "ObjectFactory") -> Any:
        if not (isinstance(type_, type) and issubclass(type_, enum.Enum)):
            return NOT_HANDLED

        members = list(type_)
        if not members:
            return NOT_HANDLED
        return Handled(factory.any_choice(members))


def builtin_customizations() -> list:
    """Customizations installed at the bottom of every default registry."""
    return [UnionCustomization(), LiteralCustomization(), EnumCustomization()]
