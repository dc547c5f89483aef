"""CLI for building and scoring mining bandit instances."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Sequence

from .config import load_config, run_mining_benchmark_from_config
from .serialization import write_benchmark_json


def run_mining_cli(argv: Sequence[str] | None = None) -> int:
    """Build a mining bandit from a seed or config and score joint actions.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        CLI argument list. When ``None``, process arguments are used.

    Returns
    -------
    int
        Exit code (`0` on success).
    """

    parser = argparse.ArgumentParser(description="Build a mining factored bandit and score joint actions.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--config", help="Path to benchmark JSON or YAML config.")
    source.add_argument("--seed", type=int, help="Seed for a random mining instance.")
    parser.add_argument(
        "--rng-seed",
        type=int,
        default=None,
        help="Seed for reward sampling with --seed. Defaults to --seed.",
    )
    parser.add_argument(
        "--action",
        action="append",
        default=[],
        help="Joint action as a JSON array, e.g. '[0, 1, 3]'. Repeatable.",
    )
    parser.add_argument(
        "--n-samples",
        type=int,
        default=None,
        help="Sampled rounds per scored action.",
    )
    parser.add_argument("--output", default=None, help="Optional JSON summary path.")
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=("debug", "info", "warning", "error"),
        help="Logging verbosity.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        cli_actions = [_parse_action(raw) for raw in args.action]
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper()))

    if args.config is not None:
        config = load_config(args.config)
    else:
        kwargs: dict[str, Any] = {"seed": int(args.seed)}
        if args.rng_seed is not None:
            kwargs["rng_seed"] = int(args.rng_seed)
        config = {"problem": {"component_id": "random_mining_bandit", "kwargs": kwargs}}

    if cli_actions:
        config["actions"] = [*config.get("actions", []), *cli_actions]
    if args.n_samples is not None:
        config["n_samples"] = int(args.n_samples)

    result = run_mining_benchmark_from_config(config)
    bandit = result.bandit

    print(
        "Mining bandit: "
        f"n_villages={bandit.n_villages}, n_mines={bandit.n_mines}, reward_norm={bandit.reward_norm:.6f}"
    )
    print(f"Action space: {list(bandit.get_a())}")
    print(f"Optimal action: {list(bandit.get_optimal_action())}")
    for evaluation in result.evaluations:
        line = f"Action {list(evaluation.action)}: output={evaluation.total_output:.6f}, regret={evaluation.regret:.6f}"
        if evaluation.mean_sampled_reward is not None:
            line += f", mean_reward={evaluation.mean_sampled_reward:.4f} over {evaluation.n_samples} samples"
        print(line)

    if args.output is not None:
        path = write_benchmark_json(result, args.output)
        print(f"Summary JSON: {path}")
    return 0


def _parse_action(raw: str) -> list[int]:
    """Parse one ``--action`` JSON array."""

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"--action must be a JSON array of integers, got {raw!r}") from exc
    if not isinstance(parsed, list) or not all(isinstance(a, int) and not isinstance(a, bool) for a in parsed):
        raise ValueError(f"--action must be a JSON array of integers, got {raw!r}")
    return parsed


def main() -> None:
    """Execute mining CLI and exit with returned code."""

    raise SystemExit(run_mining_cli())


if __name__ == "__main__":
    main()


__all__ = ["main", "run_mining_cli"]
