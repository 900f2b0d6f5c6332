"""Tests for load_machine and dump_machine."""
from __future__ import annotations

import json

import pytest
from finity import (
    Binding,
    CallbackRegistry,
    DefinitionError,
    FunctionCallback,
    Machine,
    MethodCallback,
    MissingEndpointsError,
    Transition,
    dump_machine,
    load_machine,
)

ORDER_DEFINITION = {
    "name": "orders",
    "initial": "pending",
    "states": {
        "pending": {},
        "paid": {"on_enter": "notify_paid"},
        "shipped": {"on_leave": "archive"},
        "cancelled": {},
    },
    "events": {
        "pay": [{"from": "pending", "to": "paid", "guard": "has_amount"}],
        "ship": [{"from": "paid", "to": "shipped", "action": "stamp"}],
        "cancel": [{"from": ["pending", "paid"], "to": "cancelled"}],
    },
}


class Order:
    def __init__(self, amount: int) -> None:
        self.amount = amount
        self.log: list[str] = []

    def notify_paid(self) -> None:
        self.log.append("notified")

    def stamp(self) -> None:
        self.log.append("stamped")


class TestLoadMachine:
    """Test cases for load_machine."""

    def test_builds_states_and_events(self) -> None:
        """States, events and named callbacks are built from the dict."""
        machine = load_machine(ORDER_DEFINITION)

        assert machine.name == "orders"
        assert machine.initial_state() == "pending"
        assert machine.state_names() == ["pending", "paid", "shipped", "cancelled"]
        assert machine.event_names() == ["pay", "ship", "cancel"]
        assert machine.states["paid"].on_enter == MethodCallback("notify_paid")
        assert machine.events["cancel"].transitions()[0].sources == ("pending", "paid")

    def test_registry_callbacks_take_precedence(self) -> None:
        """Registered callbacks win over host method names."""
        callbacks = CallbackRegistry()
        callbacks.register("has_amount", lambda order: order.amount > 0)
        machine = load_machine(ORDER_DEFINITION, callbacks)

        guard = machine.events["pay"].transitions()[0].guard
        assert isinstance(guard, FunctionCallback)
        assert guard.name == "has_amount"

        order = Order(amount=0)
        binding = Binding(machine, order)
        assert binding.fire("pay") == "pending"
        order.amount = 10
        assert binding.fire("pay") == "paid"
        assert binding.fire("ship") == "shipped"
        assert order.log == ["notified", "stamped"]

    def test_states_as_list(self) -> None:
        """States may be given as a plain list of names."""
        machine = load_machine({"states": ["a", "b"], "events": {}})
        assert machine.name == "default"
        assert machine.state_names() == ["a", "b"]
        assert machine.initial_state() == "a"

    def test_accepts_json_text(self) -> None:
        """A definition parsed from JSON text loads."""
        machine = load_machine(json.loads(json.dumps(ORDER_DEFINITION)))
        assert machine.event_names() == ["pay", "ship", "cancel"]

    def test_missing_endpoint_raises(self) -> None:
        """A transition without "to" raises MissingEndpointsError."""
        with pytest.raises(MissingEndpointsError):
            load_machine({"states": ["a"], "events": {"go": [{"from": "a"}]}})

    @pytest.mark.parametrize(
        "definition",
        [
            [],
            {"states": "a"},
            {"states": {"a": "entry"}},
            {"events": []},
            {"events": {"go": {"from": "a", "to": "b"}}},
            {"events": {"go": ["a"]}},
            {"statez": ["a"]},
            {"states": {"a": {"on_entry": "x"}}},
            {"events": {"go": [{"from": "a", "to": "b", "if": "x"}]}},
            {"events": {"go": [{"from": "a", "to": "b", "guard": 1}]}},
            {"events": {"go": [{"from": "a", "to": ["a", "b"]}]}},
            {"events": {"go": [{"from": 5, "to": "b"}]}},
            {"events": {"go": [{"from": [["a"]], "to": "b"}]}},
        ],
    )
    def test_malformed_definitions_raise(self, definition) -> None:
        """Malformed shapes raise DefinitionError."""
        with pytest.raises(DefinitionError):
            load_machine(definition)

    def test_unknown_target_loads(self) -> None:
        """Targets are not checked when loading; dispatch reports them."""
        machine = load_machine(
            {"states": ["a"], "events": {"go": [{"from": "a", "to": "nowhere"}]}}
        )
        assert machine.has_event("go")


class TestDumpMachine:
    """Test cases for dump_machine."""

    def test_round_trip(self) -> None:
        """Dumping a loaded definition gives back the same dict."""
        data = dump_machine(load_machine(ORDER_DEFINITION))
        assert data == ORDER_DEFINITION

    def test_round_trip_with_registry(self) -> None:
        """Registry callbacks are dumped by their registered name."""
        callbacks = CallbackRegistry()
        callbacks.register("has_amount", lambda order: order.amount > 0)
        data = dump_machine(load_machine(ORDER_DEFINITION, callbacks))
        assert data == ORDER_DEFINITION

    def test_inline_function_cannot_be_dumped(self) -> None:
        """Inline functions have no name and cannot be dumped."""
        machine = Machine()
        machine.state("a")
        machine.event("go", Transition("a", "a", guard=lambda h: True))
        with pytest.raises(DefinitionError, match="inline function"):
            dump_machine(machine)

    def test_empty_machine(self) -> None:
        """An empty machine dumps without an initial state."""
        assert dump_machine(Machine()) == {"name": "default", "states": {}, "events": {}}
