"""M1-CLI-01~04 local hot-seat runner contracts."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import engine.cli as cli  # noqa: E402
from engine.errors import InvalidStateError  # noqa: E402


def test_m1_cli_01_missing_seed_uses_time_provider() -> None:
    """M1-CLI-01: omitted seed is derived from the time provider, explicit seed wins."""
    assert cli.resolve_seed(seed=None, now_provider=lambda: 1739769600123456789) == 1739769600123456789
    assert cli.resolve_seed(seed=42) == 42


def test_m1_cli_02_state_view_marks_turn_holder_and_banked_players() -> None:
    """M1-CLI-02: rendered view shows round, pot and the acting seat marker."""
    engine = cli.build_engine(["Alice", "Bob"], total_rounds=2, seed=1)
    engine.start_game()
    engine.roll_dice("seat1", 2, 2)

    rendered = cli.render_state_view(engine.dump_state())

    assert "round: 1/2" in rendered
    assert "pot: 4" in rendered
    assert "> seat0 Alice" in rendered
    assert "last roll: 2+2 = 4" in rendered


def test_m1_cli_03_apply_command_routes_to_engine() -> None:
    """M1-CLI-03: typed commands map onto engine actions and report errors."""
    engine = cli.build_engine(["Alice", "Bob"], total_rounds=1, seed=3)
    engine.start_game()

    assert cli.apply_command(engine, "r 2 3") is None
    assert cli.apply_command(engine, "p 9") is None
    with pytest.raises(InvalidStateError):
        cli.apply_command(engine, "b 0")
    assert cli.apply_command(engine, "r 4 4") is None
    assert engine.state.shared_round_score == 22
    assert engine.players[0].use_physical_dice is True

    assert cli.apply_command(engine, "b 0") is None
    assert cli.apply_command(engine, "b 1") == "everyone banked, round settled"
    assert engine.state.status.value == "finished"

    assert cli.apply_command(engine, "u") == "undone"
    with pytest.raises(ValueError):
        cli.apply_command(engine, "x")
    with pytest.raises(ValueError):
        cli.apply_command(engine, "b 9")


def test_m1_cli_04_run_cli_plays_until_finished() -> None:
    """M1-CLI-04: scripted input drives one full game and announces the winner."""
    commands = iter(["r 1 1", "nonsense", "r 2 2", "r 3 3", "b 1", "r 3 4", "a"])
    outputs: list[str] = []

    code = cli.run_cli(["Alice", "Bob"], total_rounds=1, seed=5, input_fn=lambda _: next(commands), output_fn=outputs.append)

    assert code == 0
    assert outputs[0] == "seed=5"
    assert any(line.startswith("error:") for line in outputs)
    assert outputs[-1] == "game over, winner: Bob"
