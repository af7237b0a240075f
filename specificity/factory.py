"""
factory.py - The ObjectFactory Facade

ObjectFactory creates pseudo-random values and object graphs for unit tests.
Tests need to be repeatable, so every factory owns a numpy Generator seeded
with a fixed constant (or a caller supplied one); two factories with the same
seed produce the same values for the same sequence of calls.

Resolution Order:
----------------
For each request the first matching mechanism wins:
1. The factory's instance registry (built-ins, registrations, frozen values
   and previously derived generation functions)
2. The customization stack, newest first
3. Collection-shaped types: rejected with UnsupportedCollectionError
4. Constructor synthesis; the derived generation function is cached in the
   shared registry and in this factory's registry

Example Usage:
-------------
    >>> from specificity import ObjectFactory
    >>>
    >>> factory = ObjectFactory()
    >>> factory.any(int)
    >>> factory.any(Order)               # Order(customer=..., total=...)
    >>>
    >>> factory.register(Widget, lambda f: Widget(42))
    >>> factory.any(Widget).size
    42
    >>>
    >>> account = factory.freeze(Account("alice"))
    >>> factory.any(Account) is account
    True
"""

from __future__ import annotations

from typing import Any, List, Optional

import numpy as np
from loguru import logger

from .customizations import run_customizations
from .generators import PrimitiveGenerators
from .registry import ObjectFactoryRegistry, default_registry
from .synthesis import derive_generation_function, is_collection_type, reject_collection
from .types import GenerationFunction, Handled, ResolutionDepthError, describe_type


# Compile-time constant so test runs are repeatable.
DEFAULT_SEED = 0x73577357

# Nested resolutions allowed before a cyclic type graph is reported.
DEFAULT_MAX_DEPTH = 64


class ObjectFactory(PrimitiveGenerators):
    """
    Factory for pseudo-random objects and values.

    Parameters
    ----------
    seed : int, default=DEFAULT_SEED
        Seed of the factory's private random number generator. Use a
        constant so tests stay repeatable.
    registry : ObjectFactoryRegistry, optional
        Shared registry to start from and to cache derived generation
        functions in. Defaults to the process-wide `default_registry()`.
    max_depth : int, default=DEFAULT_MAX_DEPTH
        Maximum nesting of `any` calls before ResolutionDepthError is raised.

    Examples
    --------
    >>> factory = ObjectFactory(seed=1234)
    >>> factory.any_int(0, 10)
    >>> factory.any(datetime)

    Notes
    -----
    A factory is not thread-safe; use one per test. The shared registry is
    synchronized and may be used by factories on several threads.
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        registry: Optional[ObjectFactoryRegistry] = None,
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        if max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {max_depth}")

        self._seed = seed
        self._rng = np.random.default_rng(seed)
        self._shared = registry if registry is not None else default_registry()
        self._registry = self._shared.copy()
        self._max_depth = max_depth
        self._resolving: List[Any] = []

    def __repr__(self) -> str:
        return f"ObjectFactory(seed={self._seed:#x}, types={len(self._registry)})"

    @property
    def seed(self) -> int:
        """Seed the random number generator was created with."""
        return self._seed

    @property
    def registry(self) -> ObjectFactoryRegistry:
        """This factory's instance registry."""
        return self._registry

    @property
    def shared_registry(self) -> ObjectFactoryRegistry:
        """The registry derived generation functions are cached in."""
        return self._shared

    @property
    def max_depth(self) -> int:
        return self._max_depth

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def any(self, type_: Any) -> Any:
        """
        Generate a pseudo-random instance of `type_`.

        Parameters
        ----------
        type_ : Any
            A class or typing construct (``Optional[int]``, ``Literal[...]``).

        Returns
        -------
        Any
            The generated value.

        Raises
        ------
        UnconstructibleTypeError
            For abstract classes, protocols and other non-constructible
            descriptors that nothing is registered for.
        NoPublicConstructorError
            If the class exposes no constructor.
        UnsupportedCollectionError
            For collection types without a registration or customization.
        ResolutionDepthError
            If nested resolution exceeds `max_depth` (cyclic type graphs).
        """
        if len(self._resolving) >= self._max_depth:
            error = ResolutionDepthError(tuple(self._resolving) + (type_,), self._max_depth)
            logger.error(str(error))
            raise error

        self._resolving.append(type_)
        try:
            return self._resolve(type_)
        finally:
            self._resolving.pop()

    def _resolve(self, type_: Any) -> Any:
        generate = self._registry.get(type_)
        if generate is not None:
            return generate(self)

        result = run_customizations(type_, self, self._registry.customizations)
        if isinstance(result, Handled):
            return result.value

        if is_collection_type(type_):
            raise reject_collection(type_)

        return self._synthesize(type_)

    def _synthesize(self, type_: Any) -> Any:
        generate = self._shared.cache(type_, derive_generation_function(type_))
        self._registry.register(type_, generate)
        logger.debug(f"Cached generation function for {describe_type(type_)}")
        return generate(self)

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    def register(self, type_: Any, generation_function: GenerationFunction) -> None:
        """
        Override how `type_` is produced by this factory.

        Parameters
        ----------
        type_ : Any
            The type descriptor to override.
        generation_function : Callable[[ObjectFactory], Any]
            Called with this factory for every request of `type_`.
        """
        self._registry.register(type_, generation_function)

    def freeze(self, instance: Any, as_type: Any = None) -> Any:
        """
        Make every later request for the type return `instance`.

        Parameters
        ----------
        instance : Any
            The value to pin.
        as_type : Any, optional
            Type to pin; defaults to ``type(instance)``.

        Returns
        -------
        Any
            `instance`.
        """
        return self._registry.freeze(instance, as_type)

    def customize(self, customization: Any) -> None:
        """Push a customization; it is consulted before all earlier ones."""
        self._registry.customize(customization)
