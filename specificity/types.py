"""
types.py - Core Type Definitions for Specificity

This module defines the small set of shared types used throughout specificity:
- GenerationFunction: The cached `(factory) -> value` producer signature
- Handled / NOT_HANDLED: Tagged results returned by customizations
- ConstructorShape / ParameterShape: Discovered constructor metadata
- The exception taxonomy raised by the object factory

Design Principles:
-----------------
1. Immutability where practical (frozen dataclasses for value objects)
2. Fail fast: configuration problems raise at the call site
3. Clear type discrimination (a customization either handled or did not)

Example Usage:
-------------
    >>> from specificity.types import Handled, NOT_HANDLED
    >>>
    >>> def only_widgets(type_, factory):
    ...     if type_ is Widget:
    ...         return Handled(Widget(42))
    ...     return NOT_HANDLED
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .factory import ObjectFactory


# =============================================================================
# TYPE ALIASES
# =============================================================================

# A generation function takes the requesting factory and returns a new value.
# Parameter values are resolved through the factory at call time, so each
# call yields a fresh pseudo-random instance.
GenerationFunction = Callable[["ObjectFactory"], Any]

# A registrar seeds a registry with producers and customizations.
Registrar = Callable[[Any], None]


# =============================================================================
# CUSTOMIZATION RESULTS
# =============================================================================

@dataclass(frozen=True)
class Handled:
    """
    Result of a customization that produced a value.

    Parameters
    ----------
    value : Any
        The produced value. May legitimately be None.
    """
    value: Any


class _NotHandled:
    """Singleton marker for a customization that declined a type."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_HANDLED"

    def __bool__(self) -> bool:
        return False


NOT_HANDLED = _NotHandled()


# =============================================================================
# CONSTRUCTOR METADATA
# =============================================================================

@dataclass(frozen=True)
class ParameterShape:
    """
    A constructor parameter that must be supplied by the factory.

    Parameters
    ----------
    name : str
        Parameter name.
    annotation : Any
        Resolved type descriptor used to request the value.
    kind : inspect._ParameterKind
        Positional or keyword binding of the parameter.
    """
    name: str
    annotation: Any
    kind: Any

    @property
    def is_positional(self) -> bool:
        return self.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        )


@dataclass(frozen=True)
class ConstructorShape:
    """
    One way of constructing a type.

    Parameters
    ----------
    name : str
        Human readable name, e.g. ``Widget`` or ``Widget.from_code``.
    target : Callable
        The callable invoked to build the instance.
    parameters : Tuple[ParameterShape, ...]
        Required parameters, in declaration order.
    """
    name: str
    target: Callable[..., Any]
    parameters: Tuple[ParameterShape, ...] = field(default_factory=tuple)

    @property
    def arity(self) -> int:
        """Number of values the factory has to produce for this shape."""
        return len(self.parameters)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ObjectFactoryError(Exception):
    """Base class for object factory configuration errors."""


class UnconstructibleTypeError(ObjectFactoryError, TypeError):
    """Raised for abstract classes, protocols and other types with no concrete shape."""


class NoPublicConstructorError(ObjectFactoryError, TypeError):
    """Raised when a class exposes no constructor the factory can call."""


class UnsupportedCollectionError(ObjectFactoryError, TypeError):
    """Raised when a collection-shaped type reaches default synthesis."""


class ResolutionDepthError(ObjectFactoryError, RecursionError):
    """
    Raised when nested resolution exceeds the factory's depth limit.

    Parameters
    ----------
    path : Tuple[Any, ...]
        The chain of type descriptors being resolved, outermost first.
    max_depth : int
        The limit that was exceeded.
    """

    def __init__(self, path: Tuple[Any, ...], max_depth: int):
        self.path = path
        self.max_depth = max_depth
        chain = " -> ".join(describe_type(t) for t in path)
        super().__init__(
            f"Resolution depth {max_depth} exceeded; the type graph is probably "
            f"cyclic. Register or freeze one of the types to break the cycle. "
            f"Path: {chain}"
        )


def describe_type(type_: Any) -> str:
    """Readable name for a type descriptor, used in messages and logs."""
    if isinstance(type_, type):
        if type_.__module__ == "builtins":
            return type_.__qualname__
        return f"{type_.__module__}.{type_.__qualname__}"
    return repr(type_)
