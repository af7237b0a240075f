"""
test_customizations.py - Tests for the Customization Stack

Tests cover:
- Precedence: newest customization first, declining falls through
- Customizations apply to nested parameters
- Result validation
- Built-in Union, Optional, Literal and Enum handling
"""

from typing import Literal, Optional, Union

import pytest

from specificity import (
    NOT_HANDLED,
    Customization,
    FunctionCustomization,
    Handled,
    ObjectFactory,
)
from specificity.customizations import as_customization, run_customizations

from model_types import Color, Customer, Order, Widget


class FixedWidgets(Customization):
    def __init__(self, size):
        self.size = size

    def try_get_any(self, type_, factory):
        if type_ is Widget:
            return Handled(Widget(self.size))
        return NOT_HANDLED


class Recorder(Customization):
    """Declines everything, remembering what it was asked for."""

    def __init__(self):
        self.seen = []

    def try_get_any(self, type_, factory):
        self.seen.append(type_)
        return NOT_HANDLED


class TestPrecedence:
    """Tests for the order customizations are consulted in."""

    def test_newest_wins(self, factory):
        factory.customize(FixedWidgets(1))
        factory.customize(FixedWidgets(2))

        assert factory.any(Widget).size == 2

    def test_declining_falls_through(self, factory):
        factory.customize(FixedWidgets(1))
        recorder = Recorder()
        factory.customize(recorder)

        assert factory.any(Widget).size == 1
        assert recorder.seen == [Widget]

    def test_all_decline_falls_back_to_construction(self, factory):
        factory.customize(Recorder())

        assert isinstance(factory.any(Widget), Widget)

    def test_registration_beats_customization(self, factory):
        factory.register(Widget, lambda f: Widget(99))
        factory.customize(FixedWidgets(1))

        assert factory.any(Widget).size == 99

    def test_applies_to_nested_parameters(self, factory):
        customer = Customer("alice", None)
        factory.customize(
            lambda type_, f: Handled(customer) if type_ is Customer else NOT_HANDLED
        )

        assert factory.any(Order).customer is customer

    def test_handled_none_is_a_value(self, factory):
        factory.customize(lambda type_, f: Handled(None) if type_ is Widget else NOT_HANDLED)

        assert factory.any(Widget) is None

    def test_can_call_back_into_factory(self, factory):
        factory.customize(
            lambda type_, f: Handled(Widget(f.any_int(0, 5))) if type_ is Widget else NOT_HANDLED
        )

        assert 0 <= factory.any(Widget).size < 5

    def test_added_after_synthesis_does_not_apply(self, factory):
        """Derived generation functions are cached before the customization exists."""
        factory.any(Widget)
        factory.customize(FixedWidgets(-1))

        assert factory.any(Widget).size != -1

    def test_scoped_to_factory(self, factory, registry):
        factory.customize(FixedWidgets(1))
        other = ObjectFactory(registry=registry)

        assert isinstance(factory.registry.customizations[0], FixedWidgets)
        assert not any(isinstance(c, FixedWidgets) for c in other.registry.customizations)
        assert not any(isinstance(c, FixedWidgets) for c in registry.customizations)


class TestRunCustomizations:

    def test_returns_first_handled(self, factory):
        result = run_customizations(Widget, factory, [Recorder(), FixedWidgets(4), FixedWidgets(5)])

        assert isinstance(result, Handled)
        assert result.value.size == 4

    def test_nothing_handled(self, factory):
        assert run_customizations(Widget, factory, [Recorder()]) is NOT_HANDLED

    def test_invalid_result_raises(self, factory):
        bad = FunctionCustomization(lambda type_, f: Widget(1))

        with pytest.raises(TypeError, match="must return Handled"):
            run_customizations(Widget, factory, [bad])

    def test_bare_none_is_invalid(self, factory):
        factory.customize(lambda type_, f: None)

        with pytest.raises(TypeError, match="NOT_HANDLED"):
            factory.any(Widget)


class TestAsCustomization:

    def test_passes_customization_through(self):
        customization = Recorder()
        assert as_customization(customization) is customization

    def test_wraps_callable(self):
        wrapped = as_customization(lambda type_, f: NOT_HANDLED)
        assert isinstance(wrapped, FunctionCustomization)

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError, match="Expected a Customization or callable"):
            as_customization(42)

    def test_not_handled_is_falsy_singleton(self):
        assert not NOT_HANDLED
        assert repr(NOT_HANDLED) == "NOT_HANDLED"
        assert type(NOT_HANDLED)() is NOT_HANDLED


class TestBuiltinCustomizations:
    """Tests for typing constructs without constructors."""

    def test_optional_is_populated(self, factory):
        for _ in range(50):
            assert isinstance(factory.any(Optional[int]), int)

    def test_union_picks_members(self, factory):
        values = [factory.any(Union[int, str]) for _ in range(100)]

        assert {type(v) for v in values} == {int, str}

    def test_pipe_union(self, factory):
        assert isinstance(factory.any(int | None), int)

    def test_literal(self, factory):
        values = {factory.any(Literal["a", "b", 3]) for _ in range(100)}

        assert values == {"a", "b", 3}

    def test_enum(self, factory):
        values = {factory.any(Color) for _ in range(100)}

        assert values == set(Color)
