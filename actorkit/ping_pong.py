"""An actor that posts ping and pong back to itself a fixed number of times."""

from __future__ import annotations

import argparse
import asyncio
import enum
import sys
from typing import Any, TextIO

from .actor import Actor
from .actor_cell import ActorRef

__all__ = ["Message", "PingPong", "main"]

_ROUNDS = 10


class Message(enum.Enum):
    """The ball passed back and forth."""

    PING = "ping"
    PONG = "pong"

    def next(self) -> "Message":
        """Return the message that answers this one."""
        return Message.PONG if self is Message.PING else Message.PING


class PingPong(Actor):
    """Prints ``ping..`` and ``pong..`` alternately, then stops."""

    message_type = Message

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out

    @property
    def _stream(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    async def pre_start(self, myself: ActorRef, args: Any) -> int:
        myself.send_message(Message.PING)
        return 0

    async def handle(self, myself: ActorRef, message: Message, state: int) -> int | None:
        if state < _ROUNDS:
            print(f"{message.value}..", end="", file=self._stream)
            myself.send_message(message.next())
            return state + 1
        print(file=self._stream)
        myself.stop()
        return None


async def _run() -> None:
    _, handle = await PingPong().spawn()
    await handle


def main(argv: list[str] | None = None) -> int:
    """Run the ping-pong actor until it finishes."""
    parser = argparse.ArgumentParser(description="Ping-pong actor demo.")
    parser.parse_args(argv)
    asyncio.run(_run())
    return 0


if __name__ == "__main__":
    sys.exit(main())