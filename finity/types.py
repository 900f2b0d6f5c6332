"""Shared type aliases and errors for finity."""
from __future__ import annotations

from typing import Any, Callable, Union

HostFunction = Callable[[Any], Any]

# A method name on the host, or a function taking the host.
CallbackSpec = Union[str, HostFunction]


class FinityError(Exception):
    """Base class for all machine configuration and usage errors."""


class MissingEndpointsError(FinityError, ValueError):
    """Raised when a transition is built without a source or a target."""


class InvalidEndpointsError(FinityError, TypeError):
    """Raised when a transition source or target is not a state name."""


class InvalidCallbackError(FinityError, TypeError):
    """Raised when a guard, action or hook is neither a method name nor a callable."""


class MissingMethodError(FinityError, AttributeError):
    """Raised when a named callback does not exist on the host."""

    def __init__(self, host: Any, method: str) -> None:
        self.host = host
        self.method = method
        super().__init__(
            f"{type(host).__name__} has no callable attribute {method!r}"
        )


class DefinitionError(FinityError, ValueError):
    """Raised on malformed data-driven machine definitions."""


class InvalidStateError(FinityError):
    """Raised when a state name is not registered on the machine."""

    def __init__(self, state: str, message: str | None = None) -> None:
        self.state = state
        super().__init__(message or f"Invalid state {state!r}")


class InvalidDestinationError(InvalidStateError):
    """Raised when a selected transition points at an unregistered state."""

    def __init__(self, state: str, event: str) -> None:
        self.event = event
        super().__init__(
            state, f"Invalid destination state {state!r} on event {event!r}"
        )


class UnresolvedInitialStateError(FinityError):
    """Raised when no initial state can be resolved (no states registered)."""


class UnknownEventError(FinityError, KeyError):
    """Raised when firing an event the machine does not define."""

    def __init__(self, event: str) -> None:
        self.event = event
        super().__init__(f"Unknown event {event!r}")

    def __str__(self) -> str:
        return self.args[0]


class UnhandledStateError(FinityError):
    """Raised when an event defines no transitions for the current state."""

    def __init__(self, state: str, event: str) -> None:
        self.state = state
        self.event = event
        super().__init__(f"No match for ({state!r}) on ({event!r})")
