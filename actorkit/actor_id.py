"""Actor identifiers, local or on a remote node."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass

__all__ = ["ActorId", "new_local_id"]


@dataclass(frozen=True)
class ActorId:
    """A globally unique actor identifier.

    A local actor has no ``node_id``; a remote actor carries the id of the
    node it lives on together with its pid on that node.
    """

    pid: int
    node_id: int | None = None

    def is_local(self) -> bool:
        """Return True if this id refers to an actor on this node."""
        return self.node_id is None

    def __str__(self) -> str:
        node = 0 if self.node_id is None else self.node_id
        return f"{node}.{self.pid}"


_allocator = itertools.count()
_allocator_lock = threading.Lock()


def new_local_id() -> ActorId:
    """Allocate a fresh local actor id."""
    with _allocator_lock:
        return ActorId(next(_allocator))