"""Top-level package for ``factored_bandit``.

Factored multi-agent bandits decompose the reward of a joint action into local
terms, each depending on a subset of agents. This package provides benchmark
problem instances for algorithms that exploit that structure:

1. a problem fixes its parameters, optimal action and normalization once,
2. algorithms query it with joint actions through ``sample_r``,
3. evaluation harnesses score actions with ``get_regret``,
4. maximizers can be tested against ``get_deterministic_rules``.
"""

from .core.types import Action, PartialAction, QFunctionRule, evaluate_rules
from .problems import MiningBandit, make_mining_parameters

__all__ = [
    "Action",
    "MiningBandit",
    "PartialAction",
    "QFunctionRule",
    "evaluate_rules",
    "make_mining_parameters",
]
