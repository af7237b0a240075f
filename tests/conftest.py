"""
conftest.py - Pytest Configuration and Shared Fixtures

This file contains fixtures used across all test modules. Fixtures are
organized by category:
- Random number generators (for reproducibility)
- Registries (isolated from the process-wide default)
- Factories
"""

import pytest
import numpy as np

import specificity.registry as registry_module
from specificity import (
    DEFAULT_SEED,
    ObjectFactory,
    create_default_registry,
    reset_default_registry,
)


# =============================================================================
# GLOBAL STATE
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_default_registry(monkeypatch):
    """
    Give every test a fresh process-wide registry.

    Decorated registrars are module state as well; they are swapped for an
    empty list so registrars declared by one test do not leak into another.
    """
    monkeypatch.setattr(registry_module, "_registrars", [])
    reset_default_registry()
    yield
    reset_default_registry()


# =============================================================================
# RANDOM NUMBER GENERATORS
# =============================================================================

@pytest.fixture
def rng():
    """Seeded generator matching the factory's default seed."""
    return np.random.default_rng(seed=DEFAULT_SEED)


@pytest.fixture
def rng_alternate():
    """Alternate RNG with different seed for comparison tests."""
    return np.random.default_rng(seed=12345)


# =============================================================================
# REGISTRIES AND FACTORIES
# =============================================================================

@pytest.fixture
def registry():
    """
    A shared registry holding only the built-in producers.

    Entry-point registrars installed in the environment are not run, so
    tests see the same registry everywhere.
    """
    return create_default_registry(discover=False)


@pytest.fixture
def factory(registry):
    """Factory with the default seed on top of the isolated registry."""
    return ObjectFactory(registry=registry)


@pytest.fixture
def factory_pair(registry):
    """Two factories with the same seed sharing one registry."""
    return ObjectFactory(registry=registry), ObjectFactory(registry=registry)
