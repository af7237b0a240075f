"""
registry.py - Generation Function Registry and Registrar Discovery

This module holds the mapping from type descriptors to generation functions:
- ObjectFactoryRegistry: Thread-safe map of producers plus a customization stack
- default_registry(): The process-wide registry shared by all factories
- object_factory_registrar: Decorator tagging a `(registry) -> None` seeding hook

Every ObjectFactory copies a shared registry into its own instance registry
when it is created. Instance entries always win over shared entries for the
same type. Generation functions derived by constructor synthesis are written
back into the shared registry so later factories skip the derivation.

Registrars:
----------
The default registry is built lazily, once per process:
1. Built-in producers for primitive, temporal and numpy scalar types
2. Built-in customizations (Union, Literal, Enum)
3. Every registrar published under the ``specificity.registrars`` entry-point
   group, then every function decorated with ``@object_factory_registrar``

Example Usage:
-------------
    >>> from specificity import object_factory_registrar
    >>>
    >>> @object_factory_registrar
    ... def register_money(registry):
    ...     registry.register(Money, lambda f: Money(f.any_decimal(0, 500)))
"""

from __future__ import annotations

import inspect
import threading
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from importlib.metadata import entry_points
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from loguru import logger

from .customizations import Customization, as_customization, builtin_customizations
from .types import GenerationFunction, Registrar, describe_type


ENTRY_POINT_GROUP = "specificity.registrars"


# =============================================================================
# OBJECT FACTORY REGISTRY
# =============================================================================

class ObjectFactoryRegistry:
    """
    Repository of generation functions and customizations.

    Lookups are by exact type descriptor: registering ``datetime`` does not
    cover ``date`` and vice versa. All operations are guarded by a re-entrant
    lock so one registry can be shared between factories on several threads.

    Examples
    --------
    >>> registry = ObjectFactoryRegistry()
    >>> registry.register(Widget, lambda f: Widget(42))
    >>> registry.freeze(Clock(frozen=True))
    >>> Widget in registry
    True
    """

    def __init__(self):
        self._factories: Dict[Any, GenerationFunction] = {}
        self._customizations: List[Customization] = []
        self._lock = threading.RLock()

    def __contains__(self, type_: Any) -> bool:
        with self._lock:
            return type_ in self._factories

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)

    def __repr__(self) -> str:
        return (
            f"ObjectFactoryRegistry(types={len(self)}, "
            f"customizations={len(self.customizations)})"
        )

    # -------------------------------------------------------------------------
    # Producers
    # -------------------------------------------------------------------------

    def register(self, type_: Any, generation_function: GenerationFunction) -> None:
        """
        Install `generation_function` as the producer for `type_`.

        Parameters
        ----------
        type_ : Any
            Class or hashable typing construct.
        generation_function : Callable[[ObjectFactory], Any]
            Called with the requesting factory on every request.

        Raises
        ------
        TypeError
            If `generation_function` is not callable.
        """
        if not callable(generation_function):
            raise TypeError(
                f"Generation function for {describe_type(type_)} must be callable, "
                f"got {type(generation_function).__name__}"
            )
        with self._lock:
            self._factories[type_] = generation_function

    def freeze(self, instance: Any, as_type: Any = None) -> Any:
        """
        Pin a type to one fixed instance.

        Parameters
        ----------
        instance : Any
            The object every later request returns.
        as_type : Any, optional
            Type to pin. Defaults to ``type(instance)``.

        Returns
        -------
        Any
            `instance`, so the call can be used inline.
        """
        type_ = type(instance) if as_type is None else as_type
        self.register(type_, lambda factory: instance)
        return instance

    def get(self, type_: Any) -> Optional[GenerationFunction]:
        """The producer registered for `type_`, or None."""
        with self._lock:
            return self._factories.get(type_)

    def cache(self, type_: Any, generation_function: GenerationFunction) -> GenerationFunction:
        """
        Store a derived producer unless one is already present.

        Returns the producer that ends up registered, so concurrent callers
        converge on the first one written.
        """
        with self._lock:
            return self._factories.setdefault(type_, generation_function)

    def types(self) -> List[Any]:
        """Type descriptors with a registered producer, in registration order."""
        with self._lock:
            return list(self._factories)

    # -------------------------------------------------------------------------
    # Customizations
    # -------------------------------------------------------------------------

    def customize(self, customization: Any) -> None:
        """Push a customization; it is consulted before all earlier ones."""
        customization = as_customization(customization)
        with self._lock:
            self._customizations.append(customization)

    @property
    def customizations(self) -> Tuple[Customization, ...]:
        """Customizations in consultation order, newest first."""
        with self._lock:
            return tuple(reversed(self._customizations))

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def copy(self) -> "ObjectFactoryRegistry":
        """Independent registry with the same producers and customizations."""
        clone = ObjectFactoryRegistry()
        with self._lock:
            clone._factories = dict(self._factories)
            clone._customizations = list(self._customizations)
        return clone

    def apply(self, registrar: Registrar) -> "ObjectFactoryRegistry":
        """Run `registrar` against this registry. Returns self for chaining."""
        _validate_registrar(registrar)
        logger.debug(f"Applying registrar {_registrar_name(registrar)}")
        registrar(self)
        return self


# =============================================================================
# BUILT-IN PRODUCERS
# =============================================================================

_NUMPY_INTEGER_TYPES = (
    np.int8, np.int16, np.int32, np.int64,
    np.uint8, np.uint16, np.uint32, np.uint64,
)


def register_builtins(registry: ObjectFactoryRegistry) -> None:
    """Register producers for primitive, temporal and numpy scalar types."""
    registry.register(float, lambda f: f.any_double())
    registry.register(int, lambda f: f.any_int())
    registry.register(bool, lambda f: f.any_bool())
    registry.register(str, lambda f: f.any_string())
    registry.register(bytes, lambda f: f.any_bytes())
    registry.register(Decimal, lambda f: f.any_decimal())
    registry.register(type(None), lambda f: None)

    registry.register(datetime, lambda f: f.any_datetime())
    registry.register(date, lambda f: f.any_date())
    registry.register(time, lambda f: f.any_time())
    registry.register(timedelta, lambda f: f.any_timedelta())
    registry.register(uuid.UUID, lambda f: f.any_uuid())

    registry.register(np.float64, lambda f: np.float64(f.any_double()))
    registry.register(np.float32, lambda f: f.any_float())
    registry.register(np.bool_, lambda f: np.bool_(f.any_bool()))
    for dtype in _NUMPY_INTEGER_TYPES:
        registry.register(dtype, lambda f, dtype=dtype: f.any_integer(dtype))

    for customization in builtin_customizations():
        registry.customize(customization)


# =============================================================================
# REGISTRARS
# =============================================================================

_registrars: List[Registrar] = []
_default: Optional[ObjectFactoryRegistry] = None
_default_lock = threading.RLock()


def _registrar_name(registrar: Any) -> str:
    module = getattr(registrar, "__module__", None) or "?"
    name = getattr(registrar, "__qualname__", None) or repr(registrar)
    return f"{module}.{name}"


def _validate_registrar(registrar: Any) -> None:
    """Registrars take exactly one required positional argument: the registry."""
    if not callable(registrar):
        raise TypeError(f"Registrar must be callable, got {type(registrar).__name__}")

    try:
        signature = inspect.signature(registrar)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"Cannot inspect registrar {registrar!r}: {exc}") from exc

    required = [
        p for p in signature.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    extra = [
        p for p in signature.parameters.values()
        if p.default is inspect.Parameter.empty and p.kind is inspect.Parameter.KEYWORD_ONLY
    ]
    if len(required) != 1 or extra:
        raise TypeError(
            f"Registrar {_registrar_name(registrar)} must accept exactly one "
            f"argument (the registry), signature is {signature}"
        )


def object_factory_registrar(registrar: Registrar) -> Registrar:
    """
    Tag a ``(registry) -> None`` callable as a registrar.

    The registrar runs once against the default registry: when that registry
    is first built, or immediately if it already exists.

    Raises
    ------
    TypeError
        If the callable does not have the registrar signature.
    """
    _validate_registrar(registrar)

    with _default_lock:
        if registrar in _registrars:
            return registrar
        _registrars.append(registrar)
        registry = _default
        if registry is not None:
            registry.apply(registrar)

    return registrar


def discover_registrars() -> List[Registrar]:
    """
    Load registrars published under the ``specificity.registrars`` group.

    Entry points that do not resolve to a registrar-shaped callable are
    skipped with a warning; import failures propagate.
    """
    found: List[Registrar] = []
    for entry_point in entry_points(group=ENTRY_POINT_GROUP):
        try:
            registrar = entry_point.load()
        except Exception:
            logger.exception(f"Failed to load registrar entry point '{entry_point.name}'")
            raise

        try:
            _validate_registrar(registrar)
        except TypeError as exc:
            logger.warning(f"Skipping registrar entry point '{entry_point.name}': {exc}")
            continue

        found.append(registrar)
    return found


def _known_registrars() -> List[Registrar]:
    """Entry-point and decorated registrars, each once, in that order."""
    # Loading an entry point may import a module that also decorates the
    # same registrar.
    registrars = discover_registrars()
    registrars += list(_registrars)
    return list(dict.fromkeys(registrars))


def create_default_registry(discover: bool = True) -> ObjectFactoryRegistry:
    """
    Build a registry with built-ins and, optionally, every known registrar.

    Parameters
    ----------
    discover : bool, default=True
        Run entry-point and decorated registrars. Pass False for a registry
        that only has the built-ins (useful to isolate tests).
    """
    registry = ObjectFactoryRegistry()
    register_builtins(registry)

    if discover:
        for registrar in _known_registrars():
            registry.apply(registrar)

    return registry


def default_registry() -> ObjectFactoryRegistry:
    """
    The process-wide shared registry, built on first use.

    The registry is published before its registrars run, so a registrar that
    creates an `ObjectFactory` gets the partially populated registry instead
    of triggering another build.
    """
    global _default
    with _default_lock:
        if _default is None:
            registrars = _known_registrars()
            registry = create_default_registry(discover=False)
            _default = registry
            try:
                for registrar in registrars:
                    registry.apply(registrar)
            except Exception:
                _default = None
                raise
            logger.info(
                f"Default object factory registry ready: {len(registry)} types, "
                f"{len(registry.customizations)} customizations"
            )
        return _default


def reset_default_registry() -> None:
    """
    Drop the shared registry, including every cached generation function.

    The next `default_registry()` call rebuilds it and runs the registrars
    again. Decorated registrars stay known.
    """
    global _default
    with _default_lock:
        _default = None
