"""Run all-AI hanafuda matches and print the results.

Every seat is played by the heuristic AI. With a fixed seed the output is
reproducible, which makes this handy for checking rule changes.

Usage:
    python bin/simulate_match.py
    python bin/simulate_match.py --variant hachi_hachi --rounds 6
    python bin/simulate_match.py --variant sakura --players 4 --seed <64 hex chars>
    python bin/simulate_match.py --variant match
    python bin/simulate_match.py --matches 20
"""

from __future__ import annotations

import argparse
import logging
import statistics
import sys
import time

from hanafuda.config import EngineConfig
from hanafuda.logic.enums import Variant
from hanafuda.logic.exceptions import UnsupportedSettingsError
from hanafuda.logic.rng import validate_seed_hex
from hanafuda.logic.state import HanafudaGameState
from hanafuda.simulation import run_simulated_concentration, run_simulated_match
from shared.logging import rotate_log_file, setup_logging


def _print_match(game_state: HanafudaGameState) -> None:
    """Print the round ledger and final standings of one match."""
    print("=" * 60)
    print(f"{game_state.settings.variant.value.upper()} seed={game_state.seed[:16]}...")
    print("=" * 60)
    for record in game_state.ledger:
        winner = "-" if record.winner_seat is None else str(record.winner_seat)
        deltas = " ".join(f"{delta:+5d}" for delta in record.deltas)
        print(
            f"round {record.round_number:2d}  dealer {record.dealer_seat}  "
            f"{record.outcome.value:<9}  winner {winner}  {deltas}",
        )
    names = [config.name for config in game_state.seat_configs]
    print("final: " + ", ".join(f"{name}={score}" for name, score in zip(names, game_state.scores, strict=True)))
    print()


def simulate_matches(config: EngineConfig, args: argparse.Namespace) -> None:
    """Run the requested number of matches and print per-match and summary output."""
    overrides: dict[str, object] = {}
    if args.players is not None:
        overrides["num_players"] = args.players
    if args.rounds is not None:
        overrides["total_rounds"] = args.rounds
    settings = config.game_settings(args.variant, **overrides)

    elapsed_times = []
    wins: dict[int, int] = {}
    for index in range(args.matches):
        if config.log_dir is not None and args.matches > 1:
            rotate_log_file(config.log_dir, name=f"{settings.variant.value}-{index + 1:03d}")
        start = time.perf_counter()
        game_state = run_simulated_match(settings, seed=args.seed or "")
        elapsed_times.append(time.perf_counter() - start)
        _print_match(game_state)
        best = max(range(len(game_state.scores)), key=lambda seat: (game_state.scores[seat], -seat))
        wins[best] = wins.get(best, 0) + 1

    if args.matches > 1:
        print(f"Matches: {args.matches}")
        print(f"Wins by seat: {', '.join(f'{seat}={count}' for seat, count in sorted(wins.items()))}")
        print(f"Median time: {statistics.median(elapsed_times):.3f}s")


def simulate_concentration(config: EngineConfig, args: argparse.Namespace) -> None:
    """Clear concentration layouts with the perfect-memory player."""
    settings = config.game_settings(Variant.MATCH)
    for _ in range(args.matches):
        state = run_simulated_concentration(args.seed or "", consecutive_bonus=settings.match_consecutive_bonus)
        print(f"MATCH seed={state.seed[:16]}...  score={state.score}  moves={state.moves}")


def main() -> None:
    config = EngineConfig()
    parser = argparse.ArgumentParser(description="Simulate hanafuda matches between AI players")
    parser.add_argument(
        "--variant",
        type=Variant,
        choices=[variant.value for variant in Variant],
        default=config.default_variant,
        help=f"rule variant (default: {config.default_variant.value})",
    )
    parser.add_argument("--players", type=int, default=None, help="number of players (default: variant's usual)")
    parser.add_argument("--rounds", type=int, default=None, help="rounds per match (default: variant's usual)")
    parser.add_argument("--seed", default=None, help="64 hex character seed (default: random)")
    parser.add_argument(
        "-n",
        "--matches",
        type=int,
        default=1,
        help="number of matches to play (default: 1)",
    )
    parser.add_argument("--verbose", action="store_true", help="show engine logs")
    args = parser.parse_args()

    if args.matches < 1:
        print("Matches must be at least 1", file=sys.stderr)
        sys.exit(1)
    if args.seed is not None:
        try:
            validate_seed_hex(args.seed)
        except ValueError as e:
            print(f"Invalid seed: {e}", file=sys.stderr)
            sys.exit(1)

    setup_logging(log_dir=config.log_dir, level=None if args.verbose else logging.WARNING)

    try:
        if args.variant == Variant.MATCH:
            simulate_concentration(config, args)
        else:
            simulate_matches(config, args)
    except UnsupportedSettingsError as e:
        print(f"Unsupported settings: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
