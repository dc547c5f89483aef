"""Config-driven construction and scoring of mining bandit instances.

A benchmark config names a problem in the plugin registry and, optionally,
joint actions to score against it::

    {
        "problem": {"component_id": "random_mining_bandit", "kwargs": {"seed": 3}},
        "actions": [[0, 1, 0, 2, 3]],
        "n_samples": 100
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TextIO

import numpy as np

from factored_bandit.core.config_validation import (
    coerce_non_empty_str,
    coerce_non_negative_int,
    require_mapping,
    require_sequence,
    validate_allowed_keys,
    validate_required_keys,
)
from factored_bandit.core.types import Action, validate_joint_action
from factored_bandit.plugins import PluginRegistry, build_default_registry
from factored_bandit.problems import MiningBandit

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionEvaluation:
    """Deterministic and sampled scores of one joint action.

    Parameters
    ----------
    action : tuple[int, ...]
        Scored joint action.
    total_output : float
        Deterministic total mineral output.
    regret : float
        Gap between the optimal output and ``total_output``.
    n_samples : int
        Number of sampled rounds.
    mean_sampled_reward : float | None
        Mean over rounds of the summed per-mine Bernoulli rewards, or ``None``
        when ``n_samples`` is zero.
    """

    action: Action
    total_output: float
    regret: float
    n_samples: int
    mean_sampled_reward: float | None


@dataclass(frozen=True, slots=True)
class MiningBenchmarkResult:
    """Problem instance built from a config and its action scores."""

    component_id: str
    bandit: MiningBandit
    evaluations: tuple[ActionEvaluation, ...]


BENCHMARK_KEYS: tuple[str, ...] = ("problem", "actions", "n_samples")


def _read_json(handle: TextIO) -> Any:
    return json.load(handle)


def _read_yaml(handle: TextIO) -> Any:
    try:
        import yaml
    except ImportError as exc:  # pragma: no cover - exercised only without pyyaml
        raise ImportError(
            "YAML benchmark configs require PyYAML; install `factored-bandit[yaml]`"
        ) from exc
    return yaml.safe_load(handle)


_CONFIG_READERS: dict[str, Callable[[TextIO], Any]] = {
    ".json": _read_json,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
}


def validate_benchmark_config(config: Any) -> dict[str, Any]:
    """Check the top-level shape of a benchmark config.

    Only the section layout is checked here; problem kwargs and actions are
    validated when the problem is built and the actions are scored.

    Raises
    ------
    ValueError
        If the root is not an object, has unknown or missing keys, or the
        ``problem`` section is not an object naming a component.
    """

    root = require_mapping(config, field_name="config")
    validate_allowed_keys(root, field_name="config", allowed_keys=BENCHMARK_KEYS)
    validate_required_keys(root, field_name="config", required_keys=("problem",))

    problem_cfg = require_mapping(root["problem"], field_name="config.problem")
    validate_allowed_keys(problem_cfg, field_name="config.problem", allowed_keys=("component_id", "kwargs"))
    validate_required_keys(problem_cfg, field_name="config.problem", required_keys=("component_id",))
    return root


def load_config(path: str | Path) -> dict[str, Any]:
    """Read a benchmark config file and check its layout.

    Parameters
    ----------
    path : str | pathlib.Path
        `.json`, `.yaml` or `.yml` file.

    Returns
    -------
    dict[str, Any]
        Config mapping accepted by :func:`run_mining_benchmark_from_config`.

    Raises
    ------
    ValueError
        If the suffix is not supported or the content fails
        :func:`validate_benchmark_config`.
    """

    config_path = Path(path)
    reader = _CONFIG_READERS.get(config_path.suffix.lower())
    if reader is None:
        raise ValueError(
            f"cannot read benchmark config {config_path.name!r}; "
            f"supported suffixes: {sorted(_CONFIG_READERS)}"
        )
    with config_path.open("r", encoding="utf-8") as handle:
        raw = reader(handle)
    return validate_benchmark_config(raw)


def mining_bandit_from_config(
    config: dict[str, Any],
    *,
    registry: PluginRegistry | None = None,
) -> MiningBandit:
    """Build a mining bandit from the ``problem`` section of a config.

    Parameters
    ----------
    config : dict[str, Any]
        Benchmark configuration mapping.
    registry : PluginRegistry | None, optional
        Optional pre-built registry. Defaults to built-in registry.

    Returns
    -------
    MiningBandit
        Constructed problem instance.

    Raises
    ------
    ValueError
        If the ``problem`` section is malformed or does not build a
        :class:`MiningBandit`.
    KeyError
        If the component ID is not registered.
    """

    reg = registry if registry is not None else build_default_registry()
    problem_cfg = validate_benchmark_config(config)["problem"]
    component_id = coerce_non_empty_str(problem_cfg["component_id"], field_name="config.problem.component_id")
    kwargs = require_mapping(problem_cfg.get("kwargs", {}), field_name="config.problem.kwargs")

    problem = reg.create_problem(component_id, **kwargs)
    if not isinstance(problem, MiningBandit):
        raise ValueError(f"problem component {component_id!r} did not build a MiningBandit")
    logger.info("built %r from component %r", problem, component_id)
    return problem


def evaluate_action(bandit: MiningBandit, action: Any, *, n_samples: int = 0) -> ActionEvaluation:
    """Score one joint action.

    Sampling draws from the bandit's own generator, so scoring the same action
    twice on one instance gives different sampled means.

    Raises
    ------
    ValueError
        If ``action`` is not a valid joint action for ``bandit``.
    """

    joint = validate_joint_action(action, bandit.get_a())
    mean_reward: float | None = None
    if n_samples > 0:
        totals = np.empty(n_samples, dtype=float)
        for index in range(n_samples):
            totals[index] = float(bandit.sample_r(joint).sum())
        mean_reward = float(totals.mean())

    return ActionEvaluation(
        action=joint,
        total_output=bandit.total_output(joint),
        regret=bandit.get_regret(joint),
        n_samples=n_samples,
        mean_sampled_reward=mean_reward,
    )


def run_mining_benchmark_from_config(
    config: dict[str, Any],
    *,
    registry: PluginRegistry | None = None,
) -> MiningBenchmarkResult:
    """Build the configured problem and score every configured action.

    Parameters
    ----------
    config : dict[str, Any]
        Benchmark configuration mapping with keys ``problem`` (required),
        ``actions`` and ``n_samples``.
    registry : PluginRegistry | None, optional
        Optional pre-built registry. Defaults to built-in registry.

    Returns
    -------
    MiningBenchmarkResult
        Problem instance and per-action evaluations, in config order.
    """

    config = validate_benchmark_config(config)

    bandit = mining_bandit_from_config(config, registry=registry)
    component_id = str(config["problem"]["component_id"]).strip()
    actions = require_sequence(config.get("actions", []), field_name="config.actions")
    n_samples = coerce_non_negative_int(config.get("n_samples", 0), field_name="config.n_samples")

    evaluations: list[ActionEvaluation] = []
    for index, raw_action in enumerate(actions):
        require_sequence(raw_action, field_name=f"config.actions[{index}]")
        evaluations.append(evaluate_action(bandit, raw_action, n_samples=n_samples))

    return MiningBenchmarkResult(
        component_id=component_id,
        bandit=bandit,
        evaluations=tuple(evaluations),
    )


__all__ = [
    "BENCHMARK_KEYS",
    "ActionEvaluation",
    "MiningBenchmarkResult",
    "evaluate_action",
    "load_config",
    "mining_bandit_from_config",
    "run_mining_benchmark_from_config",
    "validate_benchmark_config",
]
