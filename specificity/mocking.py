"""
mocking.py - Automatic Mocks for Abstract Types

Without help the factory refuses to create abstract classes and protocols.
`MockCustomization` fills that gap with `unittest.mock.create_autospec`, so a
class depending on a service interface can be synthesized with an autospecced
mock standing in for the service.

The add-on is opt-in. Enable it for every factory in the process from a
registrar:

    >>> from specificity import object_factory_registrar
    >>> from specificity.mocking import register_mocks
    >>>
    >>> object_factory_registrar(register_mocks)

or publish ``register_mocks`` under the ``specificity.registrars`` entry-point
group, or apply it to one registry only:

    >>> registry = create_default_registry().apply(register_mocks)
    >>> factory = ObjectFactory(registry=registry)
    >>> factory.any(PaymentGateway).charge.return_value = True
"""

from __future__ import annotations

import inspect
from typing import Any, TYPE_CHECKING
from unittest.mock import create_autospec

from loguru import logger

from .customizations import Customization
from .registry import ObjectFactoryRegistry
from .synthesis import is_protocol
from .types import Handled, NOT_HANDLED, describe_type

if TYPE_CHECKING:
    from .factory import ObjectFactory


class MockCustomization(Customization):
    """
    Produces autospecced mock instances.

    Parameters
    ----------
    *types : type
        Concrete classes to mock as well.
    include_abstract : bool, default=True
        Mock every abstract class and protocol.
    """

    def __init__(self, *types: type, include_abstract: bool = True):
        self._types = frozenset(types)
        self._include_abstract = include_abstract

    def __repr__(self) -> str:
        names = ", ".join(sorted(describe_type(t) for t in self._types))
        return f"MockCustomization({names}, include_abstract={self._include_abstract})"

    def handles(self, type_: Any) -> bool:
        if not isinstance(type_, type):
            return False
        if type_ in self._types:
            return True
        return self._include_abstract and (inspect.isabstract(type_) or is_protocol(type_))

    def try_get_any(self, type_: Any, factory: "ObjectFactory") -> Any:
        if not self.handles(type_):
            return NOT_HANDLED

        logger.debug(f"Creating autospec mock for {describe_type(type_)}")
        return Handled(create_autospec(type_, instance=True))


def register_mocks(registry: ObjectFactoryRegistry) -> None:
    """Registrar installing a MockCustomization for abstract types."""
    registry.customize(MockCustomization())
