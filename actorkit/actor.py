"""The base class that defines an actor's behaviour."""

from __future__ import annotations

import abc
import asyncio
from typing import Any

from .actor_cell import ActorCell, ActorRef
from .messages import ActorPanicked, ActorTerminated, SupervisionEvent
from .runtime import ActorRuntime

__all__ = ["Actor"]


class Actor(abc.ABC):
    """Behaviour of an actor: its startup, message handling and shutdown.

    Every hook may return a new state; returning ``None`` keeps the current
    one. Any exception raised by a hook ends the actor: in ``pre_start`` it
    makes the spawn fail, elsewhere it is reported to the supervisor as an
    :class:`ActorPanicked` event.

    Set ``message_type`` on a subclass to restrict the messages it accepts.
    """

    message_type: type | None = None

    @abc.abstractmethod
    async def pre_start(self, myself: ActorRef, args: Any) -> Any:
        """Build and return the initial state from the startup arguments."""

    async def post_start(self, myself: ActorRef, state: Any) -> Any:
        """Run once the actor has started; failures follow supervision."""
        return None

    async def post_stop(self, myself: ActorRef, state: Any) -> Any:
        """Run after a graceful stop; not called after a kill or a crash."""
        return None

    async def handle(self, myself: ActorRef, message: Any, state: Any) -> Any:
        """Handle one incoming message."""
        return None

    async def handle_supervisor_evt(
        self, myself: ActorRef, message: SupervisionEvent, state: Any
    ) -> Any:
        """Handle an event from a supervised child.

        By default the supervisor stops as soon as any child terminates or
        crashes.
        """
        if isinstance(message, (ActorTerminated, ActorPanicked)):
            myself.stop()
        return None

    async def spawn(
        self, name: str | None = None, startup_args: Any = None
    ) -> tuple[ActorRef, asyncio.Task[None]]:
        """Start an unsupervised actor running this behaviour."""
        return await ActorRuntime.spawn(name, self, startup_args)

    async def spawn_linked(
        self,
        name: str | None,
        startup_args: Any,
        supervisor: ActorCell | ActorRef,
    ) -> tuple[ActorRef, asyncio.Task[None]]:
        """Start an actor running this behaviour, supervised by ``supervisor``."""
        return await ActorRuntime.spawn_linked(name, self, startup_args, supervisor)