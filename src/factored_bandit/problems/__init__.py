"""Factored bandit problem implementations."""

from .mining import (
    MiningBandit,
    build_villages_per_mine,
    count_mines,
    create_mining_bandit,
    create_random_mining_bandit,
    make_mining_parameters,
    mine_output,
    solve_optimal_action,
)

__all__ = [
    "MiningBandit",
    "build_villages_per_mine",
    "count_mines",
    "create_mining_bandit",
    "create_random_mining_bandit",
    "make_mining_parameters",
    "mine_output",
    "solve_optimal_action",
]
