"""Tests for the optimal joint action search."""

from __future__ import annotations

import numpy as np
import pytest

from factored_bandit.core import iter_joint_actions
from factored_bandit.problems import MiningBandit, count_mines, solve_optimal_action


def _small_instance(seed: int) -> tuple[tuple[int, ...], tuple[int, ...], tuple[float, ...]]:
    rng = np.random.default_rng(seed)
    n_villages = int(rng.integers(1, 5, endpoint=True))
    action_space = [int(a) for a in rng.integers(1, 4, size=n_villages, endpoint=True)]
    action_space[-1] = 4
    workers = tuple(int(w) for w in rng.integers(0, 6, size=n_villages, endpoint=True))
    n_mines = count_mines(action_space)
    productivity = tuple(float(p) for p in rng.uniform(0.0, 0.5, size=n_mines))
    if sum(workers) == 0:
        workers = (1,) + workers[1:]
    return tuple(action_space), workers, productivity


def _brute_force(bandit: MiningBandit) -> tuple[tuple[int, ...], float]:
    best_action: tuple[int, ...] | None = None
    best_value = -np.inf
    for action in iter_joint_actions(bandit.get_a()):
        value = bandit.total_output(action)
        if value > best_value:
            best_action, best_value = tuple(action), value
    assert best_action is not None
    return best_action, best_value


@pytest.mark.parametrize("seed", range(25))
def test_optimizer_matches_exhaustive_search(seed: int) -> None:
    """Search result should equal the first maximizer found by enumeration."""

    bandit = MiningBandit(*_small_instance(seed))
    expected_action, expected_value = _brute_force(bandit)

    assert bandit.get_optimal_action() == expected_action
    assert bandit.reward_norm == expected_value


def test_optimizer_breaks_ties_lexicographically() -> None:
    """With equal productivities every split is optimal; the first one wins."""

    bandit = MiningBandit((4, 4), (3, 2), (0.1,) * 5)

    # Splitting villages beats stacking them: 0.1*(1.03**3 + 1.03**2) > 0.1*1.03**5.
    assert bandit.get_optimal_action() == (0, 0)
    assert bandit.reward_norm == pytest.approx(0.1 * 1.03**3 + 0.1 * 1.03**2)


def test_optimizer_stacks_workers_on_a_dominant_mine() -> None:
    """Villages should pile onto one mine when it dwarfs the others."""

    productivity = (0.0, 0.0, 0.0, 0.5, 0.0, 0.0)
    action = solve_optimal_action((4, 3, 4), (2, 2, 2), productivity)

    assert action == (3, 2, 1)


def test_optimal_action_has_zero_regret() -> None:
    """Regret of the stored optimum should be exactly zero."""

    for seed in range(10):
        bandit = MiningBandit(*_small_instance(seed))
        assert bandit.get_regret(bandit.get_optimal_action()) == 0.0
