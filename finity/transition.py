"""Transition definition."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from finity.callbacks import Callback, as_callback
from finity.types import InvalidEndpointsError, MissingEndpointsError


@dataclass(frozen=True)
class Transition:
    """Immutable edge from one or more source states to a single target.

    Attributes:
        sources: Source state names. A single string is accepted and
            normalized to a one-element tuple.
        target: Destination state name.
        guard: Optional predicate. ``None`` means always allowed.
        action: Optional side effect, run only when the guard passes.
    """

    sources: tuple[str, ...]
    target: str
    guard: Callback | None = None
    action: Callback | None = None

    def __post_init__(self) -> None:
        sources = _normalize_sources(self.sources)
        if not sources or not all(sources) or not self.target:
            raise MissingEndpointsError(
                "A transition demands at least one source state and a "
                "target state it transitions to"
            )
        if not isinstance(self.target, str) or not all(
            isinstance(source, str) for source in sources
        ):
            raise InvalidEndpointsError(
                "Transition endpoints must be state names, got "
                f"sources={self.sources!r} target={self.target!r}"
            )
        object.__setattr__(self, "sources", sources)
        object.__setattr__(self, "guard", as_callback(self.guard))
        object.__setattr__(self, "action", as_callback(self.action))

    def allows(self, host: Any) -> bool:
        """Evaluate the guard without running the action."""
        return self.guard is None or bool(self.guard(host))

    def try_handle(self, host: Any) -> str | None:
        """Run the action and return the target if the guard passes.

        Returns None when the guard rejects; that is a non-match, not an error.
        """
        if not self.allows(host):
            return None
        if self.action is not None:
            self.action(host)
        return self.target


def _normalize_sources(sources: str | Iterable[str] | None) -> tuple[str, ...]:
    if sources is None:
        return ()
    if isinstance(sources, str):
        return (sources,)
    if not isinstance(sources, Iterable):
        raise InvalidEndpointsError(
            f"Transition sources must be a state name or names, got {sources!r}"
        )
    return tuple(sources)
