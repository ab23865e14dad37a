"""Actor cells: shared handles to an actor, its status and its message ports."""

from __future__ import annotations

import asyncio
import enum
import threading
from collections import deque
from collections.abc import Awaitable
from typing import Any, TypeVar

from .actor_id import ActorId, new_local_id
from .errors import ActorAlreadyRegistered, ChannelClosed, InvalidActorType
from .messages import Signal, StopMessage, SupervisionEvent
from .supervision import SupervisionTree

__all__ = [
    "ActorStatus",
    "ACTIVE_STATES",
    "ActorPortMessage",
    "ActorPortSet",
    "SignalInterrupt",
    "ActorCell",
    "ActorRef",
]

T = TypeVar("T")

_SIGNAL_CAPACITY = 2
_STOP_CAPACITY = 2


class ActorStatus(enum.IntEnum):
    """Lifecycle status of an actor."""

    UNSTARTED = 0
    STARTING = 1
    RUNNING = 2
    UPGRADING = 3
    STOPPING = 4
    STOPPED = 5


ACTIVE_STATES = (ActorStatus.STARTING, ActorStatus.RUNNING, ActorStatus.UPGRADING)


class ActorPortMessage(enum.Enum):
    """The port a received item came from, in priority order."""

    SIGNAL = "signal"
    STOP = "stop"
    SUPERVISION = "supervision"
    MESSAGE = "message"


class SignalInterrupt(Exception):
    """Work was interrupted because a signal arrived."""

    def __init__(self, signal: Signal) -> None:
        self.signal = signal
        super().__init__(f"interrupted by signal: {signal}")


class _Channel:
    """An in-process queue that wakes its listeners when items arrive."""

    def __init__(self, capacity: int | None, events: list[asyncio.Event]) -> None:
        self._items: deque[Any] = deque()
        self._capacity = capacity
        self._events = events
        self.closed = False

    @property
    def pending(self) -> bool:
        return bool(self._items)

    def send(self, item: Any) -> None:
        if self.closed:
            raise ChannelClosed()
        if self._capacity is not None and len(self._items) >= self._capacity:
            raise ChannelClosed()
        self._items.append(item)
        self._wake()

    def pop(self) -> Any:
        return self._items.popleft()

    def close(self) -> None:
        self.closed = True
        self._items.clear()
        self._wake()

    def _wake(self) -> None:
        for event in self._events:
            event.set()


class ActorPortSet:
    """The receiving side of an actor's four ports."""

    def __init__(
        self,
        signal: _Channel,
        stop: _Channel,
        supervision: _Channel,
        message: _Channel,
        any_ready: asyncio.Event,
        signal_ready: asyncio.Event,
    ) -> None:
        self._signal = signal
        self._ordered = (
            (ActorPortMessage.SIGNAL, signal),
            (ActorPortMessage.STOP, stop),
            (ActorPortMessage.SUPERVISION, supervision),
            (ActorPortMessage.MESSAGE, message),
        )
        self._any_ready = any_ready
        self._signal_ready = signal_ready

    async def _next_signal(self) -> Signal:
        while True:
            if self._signal.pending:
                return self._signal.pop()
            if self._signal.closed:
                return Signal.KILL
            self._signal_ready.clear()
            await self._signal_ready.wait()

    async def run_with_signal(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless a signal arrives first.

        Raises :class:`SignalInterrupt` and cancels the work if a signal wins.
        """
        work = asyncio.ensure_future(awaitable)
        watcher = asyncio.ensure_future(self._next_signal())
        try:
            await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            watcher.cancel()
            raise
        if watcher.done():
            work.cancel()
            await asyncio.gather(work, return_exceptions=True)
            raise SignalInterrupt(watcher.result())
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)
        return work.result()

    async def listen_in_priority(self) -> tuple[ActorPortMessage, Any]:
        """Wait for the next item: signals, then stops, supervision, messages.

        Returns the port and the item; raises :class:`ChannelClosed` once the
        ports are closed.
        """
        while True:
            for kind, channel in self._ordered:
                if channel.pending:
                    return kind, channel.pop()
                if channel.closed:
                    raise ChannelClosed()
            self._any_ready.clear()
            await self._any_ready.wait()

    def close(self) -> None:
        """Close every port and drop anything still queued."""
        for _, channel in self._ordered:
            channel.close()


_names: dict[str, "ActorCell"] = {}
_names_lock = threading.Lock()


def _register(name: str, cell: "ActorCell") -> None:
    with _names_lock:
        if name in _names:
            raise ActorAlreadyRegistered(name)
        _names[name] = cell


def _unregister(name: str, cell: "ActorCell") -> None:
    with _names_lock:
        if _names.get(name) is cell:
            del _names[name]


class ActorCell:
    """A shareable handle to an actor's identity, status, ports and tree."""

    def __init__(
        self,
        actor_id: ActorId,
        name: str | None,
        message_type: type | None,
        signal: _Channel,
        stop: _Channel,
        supervision: _Channel,
        message: _Channel,
    ) -> None:
        self._id = actor_id
        self._name = name
        self.message_type = message_type
        self._status = ActorStatus.UNSTARTED
        self._signal = signal
        self._stop = stop
        self._supervision = supervision
        self._message = message
        self.tree = SupervisionTree()

    @classmethod
    def create(
        cls, name: str | None = None, message_type: type | None = None
    ) -> tuple["ActorCell", ActorPortSet]:
        """Create a cell and the port set its actor listens on.

        ``message_type`` restricts the messages the actor accepts; ``None``
        accepts anything. Raises :class:`ActorAlreadyRegistered` if the name
        is taken.
        """
        any_ready = asyncio.Event()
        signal_ready = asyncio.Event()
        signal = _Channel(_SIGNAL_CAPACITY, [any_ready, signal_ready])
        stop = _Channel(_STOP_CAPACITY, [any_ready])
        supervision = _Channel(None, [any_ready])
        message = _Channel(None, [any_ready])
        cell = cls(new_local_id(), name, message_type, signal, stop, supervision, message)
        if name is not None:
            _register(name, cell)
        ports = ActorPortSet(signal, stop, supervision, message, any_ready, signal_ready)
        return cell, ports

    @property
    def id(self) -> ActorId:
        """The actor's unique identifier."""
        return self._id

    @property
    def name(self) -> str | None:
        """The actor's registered name, if any."""
        return self._name

    @property
    def status(self) -> ActorStatus:
        """The actor's current lifecycle status."""
        return self._status

    def set_status(self, status: ActorStatus) -> None:
        """Set the status; stopping or stopped actors release their name."""
        if status in (ActorStatus.STOPPING, ActorStatus.STOPPED) and self._name is not None:
            _unregister(self._name, self)
        self._status = ActorStatus(status)

    def terminate(self) -> None:
        """Kill this actor if still active and terminate all its children."""
        if self._status <= ActorStatus.UPGRADING:
            self.kill()
        self.tree.terminate_all_children()

    def link(self, supervisor: "ActorCell") -> None:
        """Make ``supervisor`` the supervisor of this actor."""
        supervisor.tree.insert_child(self)
        self.tree.set_supervisor(supervisor)

    def unlink(self, supervisor: "ActorCell") -> None:
        """Detach from ``supervisor`` if it is this actor's supervisor."""
        if self.tree.is_child_of(supervisor.id):
            supervisor.tree.remove_child(self.id)
            self.tree.clear_supervisor()

    def clear_supervisor(self) -> None:
        """Forget this actor's supervisor without touching the supervisor."""
        self.tree.clear_supervisor()

    def kill(self) -> None:
        """Send a kill signal, cancelling any work in progress."""
        try:
            self._signal.send(Signal.KILL)
        except ChannelClosed:
            pass

    def stop(self, reason: str | None = None) -> None:
        """Ask the actor to stop after its current work."""
        try:
            self._stop.send(StopMessage(reason))
        except ChannelClosed:
            pass

    def send_supervisor_evt(self, event: SupervisionEvent) -> None:
        """Deliver a supervision event; raises :class:`ChannelClosed`."""
        self._supervision.send(event)

    def send_message(self, message: Any) -> None:
        """Deliver a message to the actor.

        Raises :class:`InvalidActorType` if the actor does not accept this
        message type and :class:`ChannelClosed` if the actor is gone.
        """
        if (
            self._id.is_local()
            and self.message_type is not None
            and not isinstance(message, self.message_type)
        ):
            raise InvalidActorType()
        self._message.send(message)

    def notify_supervisor(self, event: SupervisionEvent) -> None:
        """Forward an event to this actor's supervisor, if any."""
        self.tree.notify_supervisor(event)

    def num_children(self) -> int:
        """Number of supervised children."""
        return self.tree.num_children()

    def num_parents(self) -> int:
        """1 if this actor has a supervisor, else 0."""
        return self.tree.num_parents()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ActorRef):
            other = other.cell
        if not isinstance(other, ActorCell):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        if self._name is not None:
            return f"Actor '{self._name}' (id: {self._id})"
        return f"Actor with id: {self._id}"


class ActorRef:
    """A typed view of an :class:`ActorCell`; attribute access goes to the cell."""

    def __init__(self, cell: ActorCell) -> None:
        self._cell = cell

    @property
    def cell(self) -> ActorCell:
        """The underlying cell."""
        return self._cell

    def __getattr__(self, attr: str) -> Any:
        if attr == "_cell":
            raise AttributeError(attr)
        return getattr(self._cell, attr)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ActorRef):
            return self._cell == other._cell
        if isinstance(other, ActorCell):
            return self._cell == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._cell)

    def __repr__(self) -> str:
        return repr(self._cell)