"""JSON serialization helpers for mining benchmark outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from factored_bandit.problems import MiningBandit

from .config import ActionEvaluation, MiningBenchmarkResult


def mining_bandit_summary(bandit: MiningBandit) -> dict[str, Any]:
    """Return a JSON-compatible description of a mining bandit.

    Parameters
    ----------
    bandit : MiningBandit
        Problem instance.

    Returns
    -------
    dict[str, Any]
        Instance parameters, connectivity, optimal action and normalization
        constant.
    """

    return {
        "n_villages": bandit.n_villages,
        "n_mines": bandit.n_mines,
        "action_space": list(bandit.get_a()),
        "workers_per_village": list(bandit.workers_per_village),
        "productivity_per_mine": list(bandit.productivity_per_mine),
        "villages_per_mine": [list(group) for group in bandit.get_groups()],
        "optimal_action": list(bandit.get_optimal_action()),
        "reward_norm": bandit.reward_norm,
    }


def action_evaluation_to_dict(evaluation: ActionEvaluation) -> dict[str, Any]:
    """Serialize one action evaluation."""

    return {
        "action": list(evaluation.action),
        "total_output": evaluation.total_output,
        "regret": evaluation.regret,
        "n_samples": evaluation.n_samples,
        "mean_sampled_reward": evaluation.mean_sampled_reward,
    }


def benchmark_result_to_dict(result: MiningBenchmarkResult) -> dict[str, Any]:
    """Serialize a benchmark result."""

    return {
        "component_id": result.component_id,
        "problem": mining_bandit_summary(result.bandit),
        "evaluations": [action_evaluation_to_dict(item) for item in result.evaluations],
    }


def write_benchmark_json(result: MiningBenchmarkResult, path: str | Path) -> Path:
    """Write a benchmark result to a JSON file.

    Parent directories are created as needed.

    Returns
    -------
    pathlib.Path
        Written file path.
    """

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(benchmark_result_to_dict(result), indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return output_path


__all__ = [
    "action_evaluation_to_dict",
    "benchmark_result_to_dict",
    "mining_bandit_summary",
    "write_benchmark_json",
]
