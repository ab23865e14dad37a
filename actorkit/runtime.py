"""Spawning actors and running their message-processing loops.

A handler is any object with an async ``pre_start(myself, args)`` method
returning the initial state. It may also define async ``post_start``,
``post_stop``, ``handle`` and ``handle_supervisor_evt`` methods, each called
with ``(myself, ..., state)``. When one of these returns something other
than ``None``, that value becomes the actor's new state, so immutable
states such as numbers can be replaced. An optional ``message_type``
attribute restricts which messages the actor accepts.

Any exception raised by a hook counts as a crash of the actor: during
``pre_start`` it makes the spawn fail with :class:`StartupPanic`, anywhere
else it ends the actor and is reported to its supervisor.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from .actor_cell import (
    ActorCell,
    ActorPortMessage,
    ActorPortSet,
    ActorRef,
    ActorStatus,
    SignalInterrupt,
)
from .concurrency import spawn
from .errors import ActorAlreadyStarted, ActorPanic, ChannelClosed, StartupPanic
from .messages import (
    ActorPanicked,
    ActorStarted,
    ActorTerminated,
    BoxedState,
    Signal,
    SupervisionEvent,
)

__all__ = ["ActorRuntime"]

Hook = Callable[..., Awaitable[Any]]


async def _default_supervisor_evt(
    myself: ActorRef, message: SupervisionEvent, state: Any
) -> None:
    """Stop the supervisor whenever a child terminates or crashes."""
    if isinstance(message, (ActorTerminated, ActorPanicked)):
        myself.stop()


def _as_cell(actor: ActorCell | ActorRef) -> ActorCell:
    return actor.cell if isinstance(actor, ActorRef) else actor


class _ActorProcess:
    """The running life of one actor after a successful ``pre_start``."""

    def __init__(
        self,
        handler: Any,
        myself: ActorRef,
        ports: ActorPortSet,
        state: Any,
        supervisor: ActorCell | None,
    ) -> None:
        self.handler = handler
        self.myself = myself
        self.ports = ports
        self.state = state
        self.supervisor = supervisor
        self._post_start: Hook | None = getattr(handler, "post_start", None)
        self._post_stop: Hook | None = getattr(handler, "post_stop", None)
        self._handle: Hook | None = getattr(handler, "handle", None)
        self._handle_supervision: Hook = (
            getattr(handler, "handle_supervisor_evt", None) or _default_supervisor_evt
        )

    async def run(self) -> None:
        cell = self.myself.cell
        try:
            reason = await self._lifecycle()
        except ActorPanic as exc:
            event: SupervisionEvent = ActorPanicked(cell, exc.cause)
        except asyncio.CancelledError:
            self._finish(ActorTerminated(cell, None, str(Signal.KILL)))
            raise
        else:
            event = ActorTerminated(cell, BoxedState(self.state), reason)
        self._finish(event)

    def _finish(self, event: SupervisionEvent) -> None:
        cell = self.myself.cell
        self.ports.close()
        cell.terminate()
        cell.notify_supervisor(event)
        cell.set_status(ActorStatus.STOPPED)
        if self.supervisor is not None:
            cell.unlink(self.supervisor)

    async def _invoke(self, hook: Hook | None, *args: Any) -> None:
        if hook is None:
            return
        try:
            result = await hook(self.myself, *args, self.state)
        except Exception as exc:
            raise ActorPanic(exc) from exc
        if result is not None:
            self.state = result

    async def _lifecycle(self) -> str | None:
        cell = self.myself.cell
        await self._invoke(self._post_start)
        cell.set_status(ActorStatus.RUNNING)
        cell.notify_supervisor(ActorStarted(cell))
        try:
            reason = await self._message_loop()
        finally:
            cell.set_status(ActorStatus.STOPPING)
        await self._invoke(self._post_stop)
        return reason

    async def _message_loop(self) -> str | None:
        while True:
            try:
                kind, item = await self.ports.listen_in_priority()
            except ChannelClosed:
                return None
            if kind is ActorPortMessage.SIGNAL:
                return self._on_signal(item)
            if kind is ActorPortMessage.STOP:
                return item.reason
            hook = (
                self._handle_supervision
                if kind is ActorPortMessage.SUPERVISION
                else self._handle
            )
            try:
                await self.ports.run_with_signal(self._invoke(hook, item))
            except SignalInterrupt as interrupt:
                return self._on_signal(interrupt.signal)

    def _on_signal(self, signal: Signal) -> str:
        if signal is Signal.KILL:
            self.myself.cell.terminate()
        return str(signal)


class ActorRuntime:
    """Creates actors from handlers and starts their processing loops."""

    @classmethod
    async def spawn(
        cls, name: str | None, handler: Any, startup_args: Any = None
    ) -> tuple[ActorRef, asyncio.Task[None]]:
        """Start an unsupervised actor.

        Returns the actor's reference and a task that completes when the
        actor has terminated. Raises :class:`SpawnError` on failure.
        """
        cell, ports = cls._create(name, handler)
        return await cls._start(cell, ports, handler, startup_args, None)

    @classmethod
    async def spawn_linked(
        cls,
        name: str | None,
        handler: Any,
        startup_args: Any,
        supervisor: ActorCell | ActorRef,
    ) -> tuple[ActorRef, asyncio.Task[None]]:
        """Start an actor supervised by ``supervisor``."""
        cell, ports = cls._create(name, handler)
        return await cls._start(
            cell, ports, handler, startup_args, _as_cell(supervisor)
        )

    @classmethod
    def spawn_instant(
        cls, name: str | None, handler: Any, startup_args: Any = None
    ) -> tuple[ActorRef, asyncio.Task[asyncio.Task[None]]]:
        """Create an actor and start it in the background.

        Messages can be sent at once; they are handled after ``pre_start``.
        The returned task yields the actor's completion task, or raises
        :class:`SpawnError` if startup failed. Must be called with an event
        loop running.
        """
        cell, ports = cls._create(name, handler)
        startup = spawn(cls._start_handle(cell, ports, handler, startup_args, None))
        return ActorRef(cell), startup

    @classmethod
    def spawn_linked_instant(
        cls,
        name: str | None,
        handler: Any,
        startup_args: Any,
        supervisor: ActorCell | ActorRef,
    ) -> tuple[ActorRef, asyncio.Task[asyncio.Task[None]]]:
        """Like :meth:`spawn_instant`, linking to ``supervisor`` once started."""
        cell, ports = cls._create(name, handler)
        startup = spawn(
            cls._start_handle(cell, ports, handler, startup_args, _as_cell(supervisor))
        )
        return ActorRef(cell), startup

    @staticmethod
    def _create(name: str | None, handler: Any) -> tuple[ActorCell, ActorPortSet]:
        return ActorCell.create(name, getattr(handler, "message_type", None))

    @classmethod
    async def _start_handle(
        cls,
        cell: ActorCell,
        ports: ActorPortSet,
        handler: Any,
        startup_args: Any,
        supervisor: ActorCell | None,
    ) -> asyncio.Task[None]:
        _, handle = await cls._start(cell, ports, handler, startup_args, supervisor)
        return handle

    @staticmethod
    async def _start(
        cell: ActorCell,
        ports: ActorPortSet,
        handler: Any,
        startup_args: Any,
        supervisor: ActorCell | None,
    ) -> tuple[ActorRef, asyncio.Task[None]]:
        if cell.status is not ActorStatus.UNSTARTED:
            raise ActorAlreadyStarted()
        myself = ActorRef(cell)
        cell.set_status(ActorStatus.STARTING)
        try:
            state = await handler.pre_start(myself, startup_args)
        except asyncio.CancelledError:
            ports.close()
            cell.set_status(ActorStatus.STOPPED)
            raise
        except Exception as exc:
            ports.close()
            cell.set_status(ActorStatus.STOPPED)
            raise StartupPanic(exc) from exc

        if supervisor is not None:
            cell.link(supervisor)

        process = _ActorProcess(handler, myself, ports, state, supervisor)
        return myself, spawn(process.run())