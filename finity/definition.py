"""Build machines from JSON-compatible definitions, and write them back out.

A definition looks like::

    {
        "name": "orders",
        "initial": "pending",
        "states": {
            "pending": {},
            "paid": {"on_enter": "notify_paid"},
            "shipped": {},
        },
        "events": {
            "pay": [{"from": "pending", "to": "paid", "guard": "has_amount"}],
            "ship": [{"from": "paid", "to": "shipped", "action": "stamp"}],
        },
    }

``states`` may also be a plain list of names. Callback strings resolve
through the optional :class:`CallbackRegistry` first, otherwise they name a
method on the host.
"""
from __future__ import annotations

from typing import Any

from finity.callbacks import Callback, CallbackRegistry, as_callback, callback_name
from finity.machine import Machine
from finity.transition import Transition
from finity.types import DefinitionError

_MACHINE_KEYS = frozenset({"name", "initial", "states", "events"})
_STATE_KEYS = frozenset({"on_enter", "on_leave"})
_TRANSITION_KEYS = frozenset({"from", "to", "guard", "action"})


def load_machine(
    definition: dict[str, Any], callbacks: CallbackRegistry | None = None
) -> Machine:
    """Create a Machine from a definition dict. Raises DefinitionError if malformed."""
    if not isinstance(definition, dict):
        raise DefinitionError("Machine definition must be a dict")
    _reject_unknown("machine", definition, _MACHINE_KEYS)

    machine = Machine(
        name=definition.get("name", "default"),
        initial=definition.get("initial"),
    )

    states = definition.get("states", {})
    if isinstance(states, list):
        states = {name: {} for name in states}
    if not isinstance(states, dict):
        raise DefinitionError("'states' must be a list of names or a dict")
    for name, options in states.items():
        options = options or {}
        if not isinstance(options, dict):
            raise DefinitionError(f"State {name!r} options must be a dict")
        _reject_unknown(f"state {name!r}", options, _STATE_KEYS)
        machine.state(
            name,
            on_enter=_resolve(options.get("on_enter"), callbacks),
            on_leave=_resolve(options.get("on_leave"), callbacks),
        )

    events = definition.get("events", {})
    if not isinstance(events, dict):
        raise DefinitionError("'events' must be a dict of event name to transitions")
    for name, transitions in events.items():
        if not isinstance(transitions, list):
            raise DefinitionError(f"Event {name!r} transitions must be a list")
        event = machine.event(name)
        for options in transitions:
            if not isinstance(options, dict):
                raise DefinitionError(f"Event {name!r} transition must be a dict")
            _reject_unknown(f"event {name!r} transition", options, _TRANSITION_KEYS)
            _check_endpoints(name, options)
            event.add(Transition(
                options.get("from"),
                options.get("to"),
                guard=_resolve(options.get("guard"), callbacks),
                action=_resolve(options.get("action"), callbacks),
            ))

    return machine


def dump_machine(machine: Machine) -> dict[str, Any]:
    """Serialize a machine whose callbacks are all named.

    Inline functions cannot be written out and raise DefinitionError.
    """
    states: dict[str, dict[str, str]] = {}
    for name, state in machine.states.items():
        options: dict[str, str] = {}
        if state.on_enter is not None:
            options["on_enter"] = _name_of(state.on_enter, f"state {name!r} on_enter")
        if state.on_leave is not None:
            options["on_leave"] = _name_of(state.on_leave, f"state {name!r} on_leave")
        states[name] = options

    events: dict[str, list[dict[str, Any]]] = {}
    for name, event in machine.events.items():
        records = []
        for transition in event.transitions():
            sources = transition.sources
            record: dict[str, Any] = {
                "from": sources[0] if len(sources) == 1 else list(sources),
                "to": transition.target,
            }
            if transition.guard is not None:
                record["guard"] = _name_of(transition.guard, f"event {name!r} guard")
            if transition.action is not None:
                record["action"] = _name_of(transition.action, f"event {name!r} action")
            records.append(record)
        events[name] = records

    data: dict[str, Any] = {"name": machine.name}
    initial = machine.initial_state()
    if initial is not None:
        data["initial"] = initial
    data["states"] = states
    data["events"] = events
    return data


def _resolve(spec: Any, callbacks: CallbackRegistry | None) -> Callback | None:
    if isinstance(spec, str) and callbacks is not None and callbacks.has(spec):
        return callbacks.resolve(spec)
    if spec is not None and not isinstance(spec, str):
        raise DefinitionError(
            f"Callbacks in definitions must be names, got {type(spec).__name__}"
        )
    return as_callback(spec)


def _name_of(callback: Callback, where: str) -> str:
    name = callback_name(callback)
    if name is None:
        raise DefinitionError(f"Cannot serialize inline function for {where}")
    return name


def _check_endpoints(event: str, options: dict[str, Any]) -> None:
    # Absent endpoints are left to Transition, which raises MissingEndpointsError.
    sources = options.get("from")
    target = options.get("to")
    if target is not None and not isinstance(target, str):
        raise DefinitionError(
            f"Event {event!r} transition 'to' must be a state name, got {target!r}"
        )
    if sources is None or isinstance(sources, str):
        return
    if not isinstance(sources, (list, tuple)) or not all(
        isinstance(s, str) for s in sources
    ):
        raise DefinitionError(
            f"Event {event!r} transition 'from' must be a state name or a "
            f"list of names, got {sources!r}"
        )


def _reject_unknown(where: str, options: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(set(options) - allowed)
    if unknown:
        raise DefinitionError(f"Unknown keys for {where}: {', '.join(unknown)}")
