"""
distributions.py - Shaping of Uniform Random Draws

This module provides the distributions used by every generator in specificity:
- Distribution: Stateless strategy mapping a numpy Generator to a draw in [0, 1)
- DistributionRegistry: Repository of available distributions, looked up by name

Design Principles:
-----------------
1. Dependency Injection: Distributions never own randomness; the caller's
   Generator is passed to every call, keeping runs reproducible
2. Registry Pattern: Distributions are registered and accessed by name
3. One shaping mechanism: every bounded value in the library is derived from
   a single `sample()` call followed by a linear rescale

Example Usage:
-------------
    >>> import numpy as np
    >>> from specificity.distributions import Distribution, DistributionRegistry
    >>>
    >>> rng = np.random.default_rng(0x73577357)
    >>> Distribution.POSITIVE_NORMAL.sample(rng)   # Biased towards 0
    >>>
    >>> registry = DistributionRegistry()
    >>> registry.get("inverted_normal").sample(rng)  # Biased towards 0 and 1
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import numpy as np


# =============================================================================
# GAUSSIAN PARAMETERS
# =============================================================================

MEAN = 0.0
STDDEV = 1.0
SIGMA = 3

# Largest double strictly below 1.0.
_BELOW_ONE = float(np.nextafter(1.0, 0.0))


def _next_gaussian(rng: np.random.Generator, sigma: int = SIGMA) -> float:
    """Normal draw folded into (-1, 1) by taking it modulo `sigma`."""
    gaussian = MEAN + STDDEV * rng.standard_normal()
    return math.fmod(gaussian, sigma) / sigma


def _half_open(value: float) -> float:
    return value if value < 1.0 else _BELOW_ONE


# =============================================================================
# DISTRIBUTIONS
# =============================================================================

class Distribution(ABC):
    """
    A strategy reshaping a uniform random source into a draw in [0, 1).

    Subclasses must be stateless: the only side effect of `sample` is
    advancing the generator it is given. The built-in shapes are available
    as class attributes (``Distribution.UNIFORM`` and friends).

    Attributes
    ----------
    name : str
        Canonical (lowercase) name used by the registry.
    description : str
        Human-readable description of the shape.
    """

    name: str = ""
    description: str = ""

    UNIFORM: "Distribution"
    POSITIVE_NORMAL: "Distribution"
    NEGATIVE_NORMAL: "Distribution"
    INVERTED_NORMAL: "Distribution"

    @abstractmethod
    def sample(self, rng: np.random.Generator) -> float:
        """
        Draw the next value.

        Parameters
        ----------
        rng : np.random.Generator
            The pseudo-random source to advance.

        Returns
        -------
        float
            A value in the half-open interval [0, 1).
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class UniformDistribution(Distribution):
    name = "uniform"
    description = "Every value in [0, 1) equally likely"

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.random())


class PositiveNormalDistribution(Distribution):
    name = "positive_normal"
    description = "Folded normal, most draws close to 0"

    def sample(self, rng: np.random.Generator) -> float:
        return _half_open(abs(_next_gaussian(rng)))


class NegativeNormalDistribution(Distribution):
    name = "negative_normal"
    description = "Mirrored folded normal, most draws close to 1"

    def sample(self, rng: np.random.Generator) -> float:
        return _half_open(abs(-1.0 + abs(_next_gaussian(rng))))


class InvertedNormalDistribution(Distribution):
    name = "inverted_normal"
    description = "Normal wrapped around the interval, most draws close to 0 or 1"

    def sample(self, rng: np.random.Generator) -> float:
        value = _next_gaussian(rng, SIGMA * 2)
        return _half_open(1.0 + value if value < 0 else value)


Distribution.UNIFORM = UniformDistribution()
Distribution.POSITIVE_NORMAL = PositiveNormalDistribution()
Distribution.NEGATIVE_NORMAL = NegativeNormalDistribution()
Distribution.INVERTED_NORMAL = InvertedNormalDistribution()


# =============================================================================
# DISTRIBUTION REGISTRY
# =============================================================================

@dataclass
class DistributionInfo:
    """
    Metadata about a registered distribution.

    Attributes
    ----------
    name : str
        Canonical name of the distribution (lowercase).
    distribution : Distribution
        The strategy object.
    description : str
        Human-readable description of the distribution.
    """
    name: str
    distribution: Distribution
    description: str = ""


class DistributionRegistry:
    """
    Repository of available distributions.

    Built-in shapes are pre-registered; callers can add their own.

    Examples
    --------
    >>> registry = DistributionRegistry()
    >>> registry.list_distributions()
    ['inverted_normal', 'negative_normal', 'positive_normal', 'uniform']
    >>>
    >>> class Edges(Distribution):
    ...     def sample(self, rng):
    ...         return 0.0 if rng.random() < 0.5 else 0.999
    >>> registry.register("edges", Edges(), description="Only the interval ends")
    """

    def __init__(self):
        """Initialize with built-in distributions."""
        self._distributions: Dict[str, DistributionInfo] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        for distribution in (
            Distribution.UNIFORM,
            Distribution.POSITIVE_NORMAL,
            Distribution.NEGATIVE_NORMAL,
            Distribution.INVERTED_NORMAL,
        ):
            self.register(distribution.name, distribution, distribution.description)

    def register(
        self,
        name: str,
        distribution: Distribution,
        description: str = ""
    ) -> None:
        """
        Register a distribution under `name` (lowercased).

        Raises
        ------
        TypeError
            If `distribution` is not a Distribution.
        """
        if not isinstance(distribution, Distribution):
            raise TypeError(
                f"Expected a Distribution, got {type(distribution).__name__}"
            )

        name_lower = name.lower()
        self._distributions[name_lower] = DistributionInfo(
            name=name_lower,
            distribution=distribution,
            description=description or distribution.description,
        )

    def get(self, name: str) -> Distribution:
        """
        Retrieve a registered distribution.

        Parameters
        ----------
        name : str
            Distribution name (case-insensitive).

        Raises
        ------
        KeyError
            If the distribution is not registered.
        """
        name_lower = name.lower()

        if name_lower not in self._distributions:
            available = ", ".join(sorted(self._distributions.keys()))
            raise KeyError(
                f"Unknown distribution '{name}'. Available: {available}"
            )

        return self._distributions[name_lower].distribution

    def list_distributions(self) -> List[str]:
        """Sorted list of distribution names."""
        return sorted(self._distributions.keys())

    def get_info(self, name: str) -> Dict[str, Any]:
        """Dictionary with keys: name, description, type."""
        self.get(name)
        info = self._distributions[name.lower()]
        return {
            "name": info.name,
            "description": info.description,
            "type": type(info.distribution).__name__,
        }


# Registry consulted when a distribution is given by name.
DISTRIBUTIONS = DistributionRegistry()

DistributionLike = Union[Distribution, str, None]


def resolve_distribution(distribution: Optional[DistributionLike]) -> Distribution:
    """Map None, a registered name, or a Distribution to a Distribution."""
    if distribution is None:
        return Distribution.UNIFORM
    if isinstance(distribution, Distribution):
        return distribution
    if isinstance(distribution, str):
        return DISTRIBUTIONS.get(distribution)
    raise TypeError(
        f"distribution must be a Distribution or a name, got {type(distribution).__name__}"
    )
