"""Parent/child bookkeeping for supervised actors."""

from __future__ import annotations

import itertools
import threading
from typing import Any

from .actor_id import ActorId
from .errors import MessagingError
from .messages import SupervisionEvent

__all__ = ["SupervisionTree"]


class SupervisionTree:
    """Tracks an actor's supervised children and its own supervisor."""

    def __init__(self) -> None:
        self._children: dict[ActorId, tuple[int, Any]] = {}
        self._supervisor: Any | None = None
        self._start_order = itertools.count()
        self._lock = threading.RLock()

    def insert_child(self, child: Any) -> None:
        """Add a child, remembering the order it was started in."""
        with self._lock:
            self._children[child.id] = (next(self._start_order), child)

    def remove_child(self, child_id: ActorId) -> None:
        """Remove a child if it is present."""
        with self._lock:
            self._children.pop(child_id, None)

    def set_supervisor(self, parent: Any) -> None:
        """Set this actor's supervisor."""
        with self._lock:
            self._supervisor = parent

    def clear_supervisor(self) -> None:
        """Forget this actor's supervisor."""
        with self._lock:
            self._supervisor = None

    def terminate_all_children(self) -> None:
        """Terminate every child and unlink them from this tree."""
        with self._lock:
            children = [child for _, child in self._children.values()]
            self._children.clear()
        for child in children:
            child.terminate()
            child.clear_supervisor()

    def terminate_children_after(self, actor_id: ActorId) -> None:
        """Terminate the given child and every child started after it."""
        with self._lock:
            entry = self._children.get(actor_id)
            if entry is None:
                return
            reference = entry[0]
            doomed = [
                child
                for order, child in sorted(self._children.values(), key=lambda e: e[0])
                if order >= reference
            ]
        for child in doomed:
            child.terminate()

    def is_child_of(self, actor_id: ActorId) -> bool:
        """Return True if ``actor_id`` is this actor's supervisor."""
        with self._lock:
            parent = self._supervisor
        return parent is not None and parent.id == actor_id

    def notify_supervisor(self, event: SupervisionEvent) -> None:
        """Forward an event to the supervisor, ignoring delivery failures."""
        with self._lock:
            parent = self._supervisor
        if parent is None:
            return
        try:
            parent.send_supervisor_evt(event)
        except MessagingError:
            pass

    def num_children(self) -> int:
        """Return the number of supervised children."""
        with self._lock:
            return len(self._children)

    def num_parents(self) -> int:
        """Return 1 if a supervisor is set, else 0."""
        with self._lock:
            return int(self._supervisor is not None)