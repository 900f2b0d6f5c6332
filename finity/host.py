"""Host-side current-state storage and the fire/query operations."""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, ClassVar, Protocol, runtime_checkable

from finity.machine import Machine


@runtime_checkable
class StateStore(Protocol):
    """Where a host's current state name lives between dispatches."""

    def get(self, host: Any) -> str | None:
        """Return the stored state name, or None if never set."""
        ...

    def set(self, host: Any, state: str) -> None:
        ...


class AttributeStore:
    """Keeps the current state in an attribute on the host itself."""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute

    def get(self, host: Any) -> str | None:
        return getattr(host, self.attribute, None)

    def set(self, host: Any, state: str) -> None:
        setattr(host, self.attribute, state)


class MappingStore:
    """Keeps current states in a caller-owned mapping keyed by host.

    Hosts must be hashable. Pass a ``weakref.WeakKeyDictionary`` to avoid
    keeping hosts alive.
    """

    def __init__(self, mapping: MutableMapping[Any, str] | None = None) -> None:
        self.mapping: MutableMapping[Any, str] = {} if mapping is None else mapping

    def get(self, host: Any) -> str | None:
        return self.mapping.get(host)

    def set(self, host: Any, state: str) -> None:
        self.mapping[host] = state


def default_store(machine: Machine) -> AttributeStore:
    """Attribute store named after the machine, so machines don't collide."""
    return AttributeStore(f"_finity_{machine.name}_state")


class Binding:
    """Pairs a machine with one host and a store for its current state."""

    def __init__(
        self, machine: Machine, host: Any, store: StateStore | None = None
    ) -> None:
        self.machine = machine
        self.host = host
        self.store = store if store is not None else default_store(machine)

    def current(self) -> str | None:
        """Current state, lazily initialized to the machine's initial state."""
        state = self.store.get(self.host)
        if state is None:
            state = self.machine.initial_state()
            if state is not None:
                self.store.set(self.host, state)
        return state

    def fire(self, event: str) -> str:
        """Dispatch ``event`` and persist the resulting state name."""
        state = self.machine.dispatch(self.host, self.current(), event)
        self.store.set(self.host, state)
        return state

    def is_state(self, name: str) -> bool:
        return self.current() == name


class Stateful:
    """Mixin giving instances ``current_state``, ``fire`` and ``is_state``.

    Set ``machine`` on the class. Subclasses share their parent's machine
    unless they assign their own.
    """

    machine: ClassVar[Machine]

    def _finity_binding(self) -> Binding:
        return Binding(type(self).machine, self)

    def current_state(self) -> str | None:
        return self._finity_binding().current()

    def fire(self, event: str) -> str:
        return self._finity_binding().fire(event)

    def is_state(self, name: str) -> bool:
        return self._finity_binding().is_state(name)
