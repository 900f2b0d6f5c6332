"""Machine: state and event registries plus the dispatch algorithm."""
from __future__ import annotations

import logging
from typing import Any, Callable

from finity.callbacks import Callback
from finity.event import Event
from finity.state import State
from finity.transition import Transition
from finity.types import (
    CallbackSpec,
    InvalidDestinationError,
    InvalidStateError,
    UnknownEventError,
    UnresolvedInitialStateError,
)

logger = logging.getLogger(__name__)

TransitionHook = Callable[[Any, str, str, str], None]


class Machine:
    """A finite state machine definition shared by any number of hosts.

    The machine never stores a host's current state. Callers pass the
    current state name into :meth:`dispatch` and persist the returned name,
    so a single definition can serve many hosts at once. Dispatches against
    the same host must be serialized by the caller.
    """

    def __init__(self, name: str = "default", initial: str | None = None) -> None:
        self.name = name
        self._initial = initial
        self._states: dict[str, State] = {}
        self._events: dict[str, Event] = {}
        self._hooks: list[TransitionHook] = []

    def __repr__(self) -> str:
        return (
            f"Machine({self.name!r}, states={self.state_names()!r}, "
            f"events={self.event_names()!r})"
        )

    # --- Registration ---

    def state(
        self,
        name: str,
        on_enter: CallbackSpec | Callback | None = None,
        on_leave: CallbackSpec | Callback | None = None,
    ) -> State:
        """Register a state. Overwrites if name exists, keeping its position."""
        state = State(name, on_enter=on_enter, on_leave=on_leave)
        self._states[name] = state
        return state

    def event(self, name: str, *transitions: Transition) -> Event:
        """Register an event with the given transitions. Overwrites if name exists.

        The returned event accepts further transitions via
        :meth:`Event.transition` while the machine is being defined.
        """
        event = Event(name, transitions)
        self._events[name] = event
        return event

    def on_transition(self, hook: TransitionHook) -> None:
        """Call ``hook(host, event, old, new)`` after every state change."""
        self._hooks.append(hook)

    # --- Queries ---

    @property
    def states(self) -> dict[str, State]:
        return dict(self._states)

    @property
    def events(self) -> dict[str, Event]:
        return dict(self._events)

    def initial_state(self) -> str | None:
        """Configured initial state, else the first registered one, else None."""
        if self._initial is not None:
            return self._initial
        return next(iter(self._states), None)

    def has_state(self, name: str) -> bool:
        return name in self._states

    def has_event(self, name: str) -> bool:
        return name in self._events

    def state_names(self) -> list[str]:
        """List registered state names in registration order."""
        return list(self._states)

    def event_names(self) -> list[str]:
        """List registered event names in registration order."""
        return list(self._events)

    def events_for(self, state: str) -> list[str]:
        """Names of events that define at least one transition from ``state``."""
        return [name for name, event in self._events.items() if event.handles(state)]

    # --- Dispatch ---

    def dispatch(self, host: Any, current: str | None, event: str) -> str:
        """Resolve ``event`` against ``current`` and return the new state name.

        When a transition is taken its action has already run, then the
        current state's exit hook, the target's entry hook and finally the
        transition hooks fire. When every candidate's guard rejects, nothing
        fires and ``current`` is returned unchanged.
        """
        handler = self._events.get(event)
        if handler is None:
            raise UnknownEventError(event)
        now = self._resolve_current(current)

        target = handler.dispatch(host, now.name)
        if target is None:
            return now.name

        upcoming = self._states.get(target)
        if upcoming is None:
            raise InvalidDestinationError(target, event)

        now.leave(host)
        upcoming.enter(host)
        for hook in self._hooks:
            hook(host, event, now.name, target)
        logger.debug(
            "Machine %r: %r -> %r on %r", self.name, now.name, target, event
        )
        return target

    def _resolve_current(self, current: str | None) -> State:
        if current is None:
            raise UnresolvedInitialStateError(
                f"Machine {self.name!r} has no initial state; register a state first"
            )
        state = self._states.get(current)
        if state is None:
            raise InvalidStateError(current)
        return state

    # --- Validation ---

    def validate(self) -> None:
        """Check every transition endpoint and the initial state eagerly.

        Registration never runs this check; dispatch only reports a bad
        endpoint when the offending transition is actually taken.
        """
        initial = self.initial_state()
        if initial is None:
            raise UnresolvedInitialStateError(
                f"Machine {self.name!r} has no initial state; register a state first"
            )
        if initial not in self._states:
            raise InvalidStateError(
                initial, f"Initial state {initial!r} is not registered"
            )
        for name, event in self._events.items():
            for transition in event.transitions():
                for source in transition.sources:
                    if source not in self._states:
                        raise InvalidStateError(
                            source,
                            f"Event {name!r} references unknown source state {source!r}",
                        )
                if transition.target not in self._states:
                    raise InvalidDestinationError(transition.target, name)
