"""Config-driven construction, scoring and export of benchmark instances."""

from .cli import run_mining_cli
from .config import (
    BENCHMARK_KEYS,
    ActionEvaluation,
    MiningBenchmarkResult,
    evaluate_action,
    load_config,
    mining_bandit_from_config,
    run_mining_benchmark_from_config,
    validate_benchmark_config,
)
from .serialization import (
    action_evaluation_to_dict,
    benchmark_result_to_dict,
    mining_bandit_summary,
    write_benchmark_json,
)

__all__ = [
    "BENCHMARK_KEYS",
    "ActionEvaluation",
    "MiningBenchmarkResult",
    "action_evaluation_to_dict",
    "benchmark_result_to_dict",
    "evaluate_action",
    "load_config",
    "mining_bandit_from_config",
    "mining_bandit_summary",
    "run_mining_benchmark_from_config",
    "run_mining_cli",
    "validate_benchmark_config",
    "write_benchmark_json",
]
