"""A parallel Monte-Carlo simulation of a simple dice gambling game.

Each game runs in its own actor supervised by a manager actor, which
collects the results and reports the average final funds.
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

from .actor import Actor
from .actor_cell import ActorRef
from .actor_id import ActorId
from .messages import ActorPanicked, SupervisionEvent

__all__ = [
    "GameState",
    "GameMessage",
    "Game",
    "GameManagerMessage",
    "GameManagerState",
    "GameManager",
    "SimulationReport",
    "NUM_GAMES",
    "run_simulation",
    "main",
]

NUM_GAMES = 100


@dataclass
class GameState:
    """A player's progress through one game.

    Funds may go negative: a player can lose more than they started with.
    """

    funds: int = 10_000
    wager: int = 100
    total_rounds: int = 100
    current_round: int = 1
    results: list[int] = field(default_factory=list)

    @staticmethod
    def roll_dice() -> bool:
        """Roll once; the player wins 49 times in 100, a 2% house edge."""
        return random.randint(0, 100) > 51


@dataclass(frozen=True)
class GameMessage:
    """Tells a game to play a round, naming the manager to report to."""

    manager: ActorRef


class Game(Actor):
    """Plays every round of one game, then reports to the manager and stops."""

    message_type = GameMessage

    async def pre_start(self, myself: ActorRef, args: Any) -> GameState:
        return GameState()

    async def handle(
        self, myself: ActorRef, message: GameMessage, state: GameState
    ) -> None:
        if state.current_round <= state.total_rounds:
            state.current_round += 1
            if GameState.roll_dice():
                state.funds += state.wager
            else:
                state.funds -= state.wager
            state.results.append(state.funds)
            myself.send_message(message)
        else:
            message.manager.send_message(
                GameManagerMessage(myself.id, list(state.results))
            )
            myself.stop()


@dataclass(frozen=True)
class GameManagerMessage:
    """The full funds history of one finished game."""

    id: ActorId
    results: list[int]


@dataclass
class GameManagerState:
    """Progress of the whole simulation."""

    total_games: int
    games_finished: int = 0
    results: dict[ActorId, list[int]] = field(default_factory=dict)


@dataclass(frozen=True)
class SimulationReport:
    """The outcome of a finished simulation."""

    average_funds: int
    results: dict[ActorId, list[int]]

    @property
    def games(self) -> int:
        return len(self.results)


def _truncating_div(total: int, count: int) -> int:
    quotient = abs(total) // count
    return quotient if total >= 0 else -quotient


class GameManager(Actor):
    """Spawns the games, gathers their results and prints the summary."""

    message_type = GameManagerMessage

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self.report: SimulationReport | None = None

    def _print(self, text: str) -> None:
        print(text, file=self._out if self._out is not None else sys.stdout)

    async def pre_start(self, myself: ActorRef, args: int) -> GameManagerState:
        conditions = GameState()
        self._print(f"Starting funds: ${conditions.funds}")
        self._print(f"Wager per round: ${conditions.wager}")
        self._print(f"Rounds per game: {conditions.total_rounds}")
        self._print("Running simulations...")
        for _ in range(args):
            game, _ = await Game().spawn_linked(None, None, myself)
            game.send_message(GameMessage(myself))
        return GameManagerState(args)

    async def handle(
        self, myself: ActorRef, message: GameManagerMessage, state: GameManagerState
    ) -> None:
        state.results[message.id] = message.results
        state.games_finished += 1
        if state.games_finished >= state.total_games:
            total = sum(history[-1] for history in state.results.values())
            average = _truncating_div(total, state.total_games)
            self._print(f"Simulations ran: {len(state.results)}")
            self._print(f"Final average funds: ${average}")
            self.report = SimulationReport(average, dict(state.results))
            myself.stop()

    async def handle_supervisor_evt(
        self, myself: ActorRef, message: SupervisionEvent, state: GameManagerState
    ) -> None:
        """Games stop themselves after reporting; only a crashed game is fatal."""
        if isinstance(message, ActorPanicked):
            myself.stop()


async def run_simulation(num_games: int = NUM_GAMES) -> SimulationReport | None:
    """Run ``num_games`` games in parallel, print the summary and return the report.

    Returns ``None`` if the manager stopped before every game reported.
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1")
    manager = GameManager()
    _, handle = await manager.spawn(None, num_games)
    await handle
    return manager.report


def main(argv: list[str] | None = None) -> int:
    """Run the simulation from the command line."""
    parser = argparse.ArgumentParser(description="Monte-Carlo dice game simulation.")
    parser.add_argument("--games", type=int, default=NUM_GAMES)
    args = parser.parse_args(argv)
    asyncio.run(run_simulation(args.games))
    return 0


if __name__ == "__main__":
    sys.exit(main())