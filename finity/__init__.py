"""finity - Finite state machines attached to arbitrary host objects."""
from __future__ import annotations

import logging

from finity.callbacks import (
    Callback,
    CallbackRegistry,
    FunctionCallback,
    MethodCallback,
    as_callback,
)
from finity.definition import dump_machine, load_machine
from finity.event import Event
from finity.host import AttributeStore, Binding, MappingStore, Stateful, StateStore
from finity.machine import Machine, TransitionHook
from finity.state import State
from finity.transition import Transition
from finity.types import (
    DefinitionError,
    FinityError,
    InvalidCallbackError,
    InvalidDestinationError,
    InvalidEndpointsError,
    InvalidStateError,
    MissingEndpointsError,
    MissingMethodError,
    UnhandledStateError,
    UnknownEventError,
    UnresolvedInitialStateError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AttributeStore",
    "Binding",
    "Callback",
    "CallbackRegistry",
    "DefinitionError",
    "Event",
    "FinityError",
    "FunctionCallback",
    "InvalidCallbackError",
    "InvalidDestinationError",
    "InvalidEndpointsError",
    "InvalidStateError",
    "Machine",
    "MappingStore",
    "MethodCallback",
    "MissingEndpointsError",
    "MissingMethodError",
    "State",
    "StateStore",
    "Stateful",
    "Transition",
    "TransitionHook",
    "UnhandledStateError",
    "UnknownEventError",
    "UnresolvedInitialStateError",
    "as_callback",
    "dump_machine",
    "load_machine",
]
