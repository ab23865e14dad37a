import asyncio
from unittest import mock

import pytest

from actorkit.monte_carlo import GameState, main, run_simulation


@pytest.mark.parametrize("roll,expected", [(52, True), (51, False), (0, False), (100, True)])
def test_roll_dice_threshold(roll, expected):
    with mock.patch("random.randint", return_value=roll) as randint:
        assert GameState.roll_dice() is expected
    randint.assert_called_once_with(0, 100)


@pytest.mark.asyncio
async def test_simulation_histories_are_consistent():
    defaults = GameState()
    report = await asyncio.wait_for(run_simulation(4), 10)

    assert report.games == 4
    assert all(actor_id.is_local() for actor_id in report.results)
    for history in report.results.values():
        assert len(history) == defaults.total_rounds
        steps = [defaults.funds, *history]
        assert all(abs(b - a) == defaults.wager for a, b in zip(steps, steps[1:]))
    finals = [history[-1] for history in report.results.values()]
    assert min(finals) <= report.average_funds <= max(finals)


@pytest.mark.asyncio
async def test_always_winning_games_agree():
    defaults = GameState()
    with mock.patch("random.randint", return_value=100):
        report = await asyncio.wait_for(run_simulation(3), 10)

    finals = {history[-1] for history in report.results.values()}
    assert len(finals) == 1
    assert report.average_funds == finals.pop()
    for history in report.results.values():
        assert history == sorted(history)
        assert history[0] == defaults.funds + defaults.wager


@pytest.mark.asyncio
async def test_simulation_output(capsys):
    await asyncio.wait_for(run_simulation(3), 10)
    lines = capsys.readouterr().out.splitlines()

    assert lines[:4] == [
        "Starting funds: $10000",
        "Wager per round: $100",
        "Rounds per game: 100",
        "Running simulations...",
    ]
    assert lines[4] == "Simulations ran: 3"
    assert lines[5].startswith("Final average funds: $")


@pytest.mark.asyncio
async def test_zero_games_rejected():
    with pytest.raises(ValueError):
        await run_simulation(0)


def test_main_runs(capsys):
    assert main(["--games", "2"]) == 0
    assert "Simulations ran: 2" in capsys.readouterr().out