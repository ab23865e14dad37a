"""Error types raised by the actor framework."""

from __future__ import annotations

__all__ = [
    "SpawnError",
    "StartupPanic",
    "StartupCancelled",
    "ActorAlreadyStarted",
    "ActorAlreadyRegistered",
    "ActorError",
    "ActorCancelled",
    "ActorPanic",
    "MessagingError",
    "ChannelClosed",
    "InvalidActorType",
    "BoxedDowncastError",
]


class SpawnError(Exception):
    """An actor could not be started."""


class StartupPanic(SpawnError):
    """The actor failed or crashed during startup."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Actor panicked during startup '{cause}'")


class StartupCancelled(SpawnError):
    """The startup task was cancelled."""

    def __init__(self) -> None:
        super().__init__(
            "Actor failed to startup due to processing task being cancelled"
        )


class ActorAlreadyStarted(SpawnError):
    """An actor cannot be started more than once."""

    def __init__(self) -> None:
        super().__init__("Actor cannot be re-started more than once")


class ActorAlreadyRegistered(SpawnError):
    """The requested actor name is already taken in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Actor '{name}' is already registered in the actor registry"
        )


class ActorError(Exception):
    """The actor's processing loop ended abnormally."""


class ActorCancelled(ActorError):
    """Work inside the actor was cancelled."""

    def __init__(self) -> None:
        super().__init__("Actor operation cancelled")


class ActorPanic(ActorError):
    """The actor raised an unhandled error while processing."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Actor panicked '{cause}'")


class MessagingError(Exception):
    """A message could not be delivered."""


class ChannelClosed(MessagingError):
    """The target channel has been closed; the actor is gone."""

    def __init__(self) -> None:
        super().__init__("Messaging failed because channel is closed")


class InvalidActorType(MessagingError):
    """The message type does not match what the actor accepts."""

    def __init__(self) -> None:
        super().__init__(
            "Messaging failed due to the provided actor type not matching "
            "the actor's properties"
        )


class BoxedDowncastError(Exception):
    """A boxed value was missing or not of the requested type."""

    def __init__(self) -> None:
        super().__init__("Failed to downcast boxed value")