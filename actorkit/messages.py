"""Built-in messages used by the actor processing loop."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, TypeVar

from .errors import BoxedDowncastError

__all__ = [
    "BoxedState",
    "StopMessage",
    "Signal",
    "SupervisionEvent",
    "ActorStarted",
    "ActorTerminated",
    "ActorPanicked",
]

T = TypeVar("T")

_EMPTY = object()


class BoxedState:
    """A holder for an actor's final state that can be taken exactly once."""

    def __init__(self, value: Any) -> None:
        self._value = value

    def take(self, expected_type: type[T]) -> T:
        """Take the value out if it is of ``expected_type``.

        The value is consumed either way; raises :class:`BoxedDowncastError`
        if it is already gone or of another type.
        """
        value, self._value = self._value, _EMPTY
        if value is _EMPTY or not isinstance(value, expected_type):
            raise BoxedDowncastError()
        return value


@dataclass(frozen=True)
class StopMessage:
    """A request to stop an actor gracefully, optionally with a reason."""

    reason: str | None = None

    def __str__(self) -> str:
        if self.reason is None:
            return "Stop"
        return f"Stop (reason = {self.reason})"


class Signal(enum.Enum):
    """A signal that takes priority over every other message."""

    KILL = "kill"

    def __str__(self) -> str:
        return "killed"


class SupervisionEvent:
    """Base class for events reported up the supervision tree."""


@dataclass
class ActorStarted(SupervisionEvent):
    """A supervised actor has started."""

    actor: Any

    def __str__(self) -> str:
        return f"Started actor {self.actor!r}"


@dataclass
class ActorTerminated(SupervisionEvent):
    """A supervised actor has stopped.

    ``state`` holds the last state when the actor shut down cleanly.
    """

    actor: Any
    state: BoxedState | None = None
    reason: str | None = None

    def __str__(self) -> str:
        if self.reason is not None:
            return f"Stopped actor {self.actor!r} (reason = {self.reason})"
        return f"Stopped actor {self.actor!r}"


@dataclass
class ActorPanicked(SupervisionEvent):
    """A supervised actor failed with an unhandled error."""

    actor: Any
    error: object

    def __str__(self) -> str:
        return f"Actor panicked {self.actor!r} - {self.error}"