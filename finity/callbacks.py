"""Guard, action and hook callbacks."""
from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Union

from finity.types import (
    CallbackSpec,
    HostFunction,
    InvalidCallbackError,
    MissingMethodError,
)

_ABSENT = object()


@dataclass(frozen=True)
class MethodCallback:
    """Calls a named method on the host with no arguments."""

    method: str

    def __call__(self, host: Any) -> Any:
        try:
            target = getattr(host, self.method)
        except AttributeError as err:
            # An existing attribute that fails to compute keeps its own error.
            if inspect.getattr_static(host, self.method, _ABSENT) is not _ABSENT:
                raise
            raise MissingMethodError(host, self.method) from err
        if not callable(target):
            raise MissingMethodError(host, self.method)
        return target()


@dataclass(frozen=True)
class FunctionCallback:
    """Calls a function with the host as its only argument.

    ``name`` is set when the function came from a :class:`CallbackRegistry`,
    so the callback can be written back out by name.
    """

    fn: HostFunction
    name: str | None = field(default=None, compare=False)

    def __call__(self, host: Any) -> Any:
        return self.fn(host)


Callback = Union[MethodCallback, FunctionCallback]


def as_callback(spec: CallbackSpec | Callback | None) -> Callback | None:
    """Normalize a user-supplied callback. ``None`` stays ``None``.

    Strings become :class:`MethodCallback`, other callables become
    :class:`FunctionCallback`. Anything else raises InvalidCallbackError.
    """
    if spec is None:
        return None
    if isinstance(spec, (MethodCallback, FunctionCallback)):
        return spec
    if isinstance(spec, str):
        if not spec:
            raise InvalidCallbackError("Callback method name must be non-empty")
        return MethodCallback(spec)
    if callable(spec):
        return FunctionCallback(spec)
    raise InvalidCallbackError(
        "Only method names and callables may be passed as callbacks, "
        f"got {type(spec).__name__}"
    )


def callback_name(callback: Callback) -> str | None:
    """Return the name a callback can be referenced by, if it has one."""
    if isinstance(callback, MethodCallback):
        return callback.method
    return callback.name


class CallbackRegistry:
    """Maps callback names to functions taking the host."""

    def __init__(self) -> None:
        self._callbacks: dict[str, HostFunction] = {}

    def register(self, name: str, fn: HostFunction) -> None:
        """Register a named callback. Overwrites if already registered."""
        if not callable(fn):
            raise InvalidCallbackError(f"Callback {name!r} is not callable")
        self._callbacks[name] = fn

    def resolve(self, name: str) -> FunctionCallback:
        """Wrap a registered function. Raises KeyError if not registered."""
        return FunctionCallback(self._callbacks[name], name=name)

    def has(self, name: str) -> bool:
        """Check if callback name is registered."""
        return name in self._callbacks

    def names(self) -> list[str]:
        """List all registered callback names."""
        return list(self._callbacks)
