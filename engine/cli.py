"""Command-line hot-seat runner for local engine debugging."""

from __future__ import annotations

import argparse
import time
from typing import Any, Callable

from engine.core import BankGameEngine
from engine.errors import EngineError
from engine.serializer import winner_ids

HELP_TEXT = (
    "commands: r | r D1 D2 | p TOTAL [d] | b SEAT | a | u | q\n"
    "  r          roll virtual dice for the turn holder\n"
    "  r D1 D2    roll with explicit dice faces\n"
    "  p TOTAL d  submit physical dice total, append 'd' for doubles\n"
    "  b SEAT     bank for the player at SEAT\n"
    "  a          host advance\n"
    "  u          host undo\n"
    "  q          quit"
)


def resolve_seed(seed: int | None, now_provider: Callable[[], int] | None = None) -> int:
    """Return an explicit seed or derive one from current time."""

    if seed is not None:
        return int(seed)

    provider = now_provider or time.time_ns
    value = int(provider())
    return abs(value)


def build_engine(names: list[str], total_rounds: int, seed: int) -> BankGameEngine:
    engine = BankGameEngine(total_rounds=total_rounds, rng_seed=seed)
    for seat, name in enumerate(names):
        engine.add_player(f"seat{seat}", name)
    return engine


def render_state_view(state: dict[str, Any]) -> str:
    """Render the dumped room state as a compact scoreboard."""

    game_state = state.get("game_state") or {}
    players = state.get("players") or []
    turn_idx = game_state.get("current_turn_index")

    lines: list[str] = ["=== Room State ==="]
    lines.append(
        f"status: {game_state.get('status')}  round: {game_state.get('current_round')}"
        f"/{game_state.get('total_rounds')}  active: {game_state.get('round_active')}"
    )
    lines.append(f"pot: {game_state.get('shared_round_score')}  rolls: {game_state.get('roll_count')}")
    last_roll = game_state.get("last_roll")
    if last_roll:
        lines.append(f"last roll: {last_roll.get('die1')}+{last_roll.get('die2')} = {last_roll.get('total')}")
    for seat, player in enumerate(players):
        marker = ">" if seat == turn_idx and game_state.get("status") == "playing" else " "
        banked = " [banked]" if player.get("banked_this_round") else ""
        lines.append(f"{marker} seat{seat} {player.get('name')}: {player.get('locked_score')}{banked}")
    return "\n".join(lines)


def apply_command(engine: BankGameEngine, command: str) -> str | None:
    """Apply one typed command; return a message for the operator, if any."""

    parts = command.split()
    if not parts:
        return None
    verb, args = parts[0].lower(), parts[1:]
    current = engine.current_player()
    current_id = current.id if current is not None else ""

    if verb == "r":
        if len(args) == 2:
            outcome = engine.roll_dice(current_id, int(args[0]), int(args[1]))
        elif not args:
            outcome = engine.roll_dice(current_id)
        else:
            raise ValueError("usage: r | r D1 D2")
        return "round dead!" if outcome.round_dead else None

    if verb == "p":
        if not args:
            raise ValueError("usage: p TOTAL [d]")
        is_doubles = len(args) > 1 and args[1].lower() == "d"
        outcome = engine.submit_physical_dice(current_id, int(args[0]), is_doubles)
        return "round dead!" if outcome.round_dead else None

    if verb == "b":
        if len(args) != 1:
            raise ValueError("usage: b SEAT")
        seat = int(args[0])
        if not 0 <= seat < len(engine.players):
            raise ValueError(f"no player at seat {seat}")
        if engine.bank(engine.players[seat].id):
            # No broadcast to wait for locally.
            engine.settle_round(engine.state.current_round)
            return "everyone banked, round settled"
        return None

    if verb == "a":
        engine.advance_turn()
        return None

    if verb == "u":
        engine.undo()
        return "undone"

    raise ValueError(f"unknown command {verb!r}")


def run_cli(
    names: list[str],
    total_rounds: int = 3,
    seed: int | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> int:
    """Run one local game until it finishes or the operator quits."""

    actual_seed = resolve_seed(seed)
    output_fn(f"seed={actual_seed}")
    output_fn(f"replay: python -m engine.cli --players {','.join(names)} --rounds {total_rounds} --seed {actual_seed}")

    engine = build_engine(names, total_rounds, actual_seed)
    engine.start_game()
    output_fn(HELP_TEXT)

    while True:
        state = engine.dump_state()
        output_fn(render_state_view(state))
        if state["game_state"]["status"] == "finished":
            winners = [player.name for player in engine.players if player.id in winner_ids(engine.players)]
            output_fn(f"game over, winner: {', '.join(winners)}")
            return 0

        command = input_fn("> ").strip()
        if command.lower() == "q":
            return 0
        try:
            message = apply_command(engine, command)
        except (EngineError, ValueError) as exc:
            output_fn(f"error: {exc}")
            continue
        if message:
            output_fn(message)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Play a dice room locally.")
    parser.add_argument("--players", default="Alice,Bob", help="Comma separated player names.")
    parser.add_argument("--rounds", type=int, default=3, help="Total rounds to play.")
    parser.add_argument("--seed", type=int, default=None, help="Optional random seed for reproducible runs.")
    args = parser.parse_args(argv)
    names = [name.strip() for name in args.players.split(",") if name.strip()]
    if not names:
        parser.error("at least one player name is required")
    return run_cli(names, total_rounds=args.rounds, seed=args.seed)


if __name__ == "__main__":
    raise SystemExit(main())
