"""State definition."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from finity.callbacks import Callback, as_callback


@dataclass(frozen=True)
class State:
    """A named state with optional entry and exit hooks.

    Hooks accept the same shapes as guards and actions: a method name on the
    host or a function taking the host.
    """

    name: str
    on_enter: Callback | None = None
    on_leave: Callback | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("State name must be non-empty")
        object.__setattr__(self, "on_enter", as_callback(self.on_enter))
        object.__setattr__(self, "on_leave", as_callback(self.on_leave))

    def enter(self, host: Any) -> None:
        if self.on_enter is not None:
            self.on_enter(host)

    def leave(self, host: Any) -> None:
        if self.on_leave is not None:
            self.on_leave(host)
