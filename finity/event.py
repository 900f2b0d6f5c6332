"""Event: named, per-source ordered transition candidates."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from finity.callbacks import Callback
from finity.transition import Transition
from finity.types import CallbackSpec, UnhandledStateError

logger = logging.getLogger(__name__)


class Event:
    """Owns the candidate transitions of one event, keyed by source state.

    Candidates for a source are tried in registration order and the first
    transition whose guard passes wins.
    """

    def __init__(self, name: str, transitions: Iterable[Transition] = ()) -> None:
        if not name:
            raise ValueError("Event name must be non-empty")
        self.name = name
        self._transitions: dict[str, list[Transition]] = {}
        self._order: list[Transition] = []
        for transition in transitions:
            self.add(transition)

    def __repr__(self) -> str:
        return f"Event({self.name!r}, sources={self.sources()!r})"

    # --- Registration ---

    def add(self, transition: Transition) -> Transition:
        """Index a transition under each of its sources."""
        self._order.append(transition)
        for source in dict.fromkeys(transition.sources):
            self._transitions.setdefault(source, []).append(transition)
        return transition

    def transition(
        self,
        sources: str | Iterable[str],
        target: str,
        guard: CallbackSpec | Callback | None = None,
        action: CallbackSpec | Callback | None = None,
    ) -> Transition:
        """Build a transition and add it to this event."""
        return self.add(Transition(sources, target, guard=guard, action=action))

    # --- Dispatch ---

    def dispatch(self, host: Any, state: str) -> str | None:
        """Return the target of the first matching candidate for ``state``.

        Raises UnhandledStateError if the event defines no transitions for
        ``state``. Returns None if candidates exist but every guard rejects.
        """
        candidates = self._transitions.get(state)
        if candidates is None:
            raise UnhandledStateError(state, self.name)
        for transition in candidates:
            target = transition.try_handle(host)
            if target is not None:
                return target
        logger.debug(
            "Event %r: no transition allowed from %r (%d candidates)",
            self.name, state, len(candidates),
        )
        return None

    # --- Queries ---

    def handles(self, state: str) -> bool:
        """Check if any transition is registered for ``state``."""
        return state in self._transitions

    def candidates(self, state: str) -> list[Transition]:
        """Registered transitions for ``state`` in evaluation order."""
        return list(self._transitions.get(state, ()))

    def sources(self) -> list[str]:
        """List source states in first-registration order."""
        return list(self._transitions)

    def transitions(self) -> list[Transition]:
        """Distinct transitions in registration order."""
        return list(self._order)
