"""Mining bandit: a factored multi-agent Bernoulli bandit.

The problem was introduced in "Learning to Coordinate with Coordination Graphs
in Repeated Single-Stage Multi-Agent Decision Problems" (Bargiacchi et al.).

A set of villages each send all their workers to a single mine. Village ``i``
can reach mines ``i .. i + A[i] - 1``, so local action ``k`` of village ``i``
means "send the workers to mine ``i + k``". Every mine produces

- ``0`` minerals when no workers are sent to it,
- ``productivity * 1.03 ** workers`` otherwise.

The amounts are normalized so that the best joint action produces exactly
``1`` in total, and each mine's normalized amount is then used as the success
probability of an independent Bernoulli draw. A single round can therefore
return a total reward above 1, but the optimal action has an expected reward
of exactly 1.
"""

from __future__ import annotations

import itertools
import logging
import math
from typing import Sequence

import numpy as np

from factored_bandit.core.types import (
    Action,
    PartialAction,
    PartialKeys,
    QFunctionRule,
    validate_action_space,
    validate_joint_action,
)
from factored_bandit.plugins import ComponentManifest

logger = logging.getLogger(__name__)

PRODUCTION_GROWTH = 1.03

VILLAGE_COUNT_RANGE: tuple[int, int] = (5, 15)
WORKERS_PER_VILLAGE_RANGE: tuple[int, int] = (1, 5)
MINES_PER_VILLAGE_RANGE: tuple[int, int] = (2, 4)
LAST_VILLAGE_MINES = 4
PRODUCTIVITY_RANGE: tuple[float, float] = (0.0, 0.5)


def mine_output(productivity: float, workers: int) -> float:
    """Return the minerals produced by one mine.

    Parameters
    ----------
    productivity : float
        Hidden productivity factor of the mine.
    workers : int
        Total workers sent to the mine.

    Returns
    -------
    float
        ``0.0`` for an idle mine, ``productivity * 1.03 ** workers`` otherwise.
    """

    if workers == 0:
        return 0.0
    return productivity * PRODUCTION_GROWTH**workers


def count_mines(action_space: Sequence[int]) -> int:
    """Return the number of mines reachable under an action space."""

    return max(village + int(size) for village, size in enumerate(action_space))


def build_villages_per_mine(action_space: Sequence[int]) -> tuple[PartialKeys, ...]:
    """Return, for each mine, the villages that can send workers to it.

    Parameters
    ----------
    action_space : Sequence[int]
        Number of reachable mines per village.

    Returns
    -------
    tuple[tuple[int, ...], ...]
        One ascending tuple of village indices per mine. A village with a
        short reach can leave a gap, e.g. ``(4, 2, 3)`` connects mine 3 to
        villages ``(0, 2)``.
    """

    space = validate_action_space(action_space)
    groups: list[list[int]] = [[] for _ in range(count_mines(space))]
    for village, size in enumerate(space):
        for mine in range(village, village + size):
            groups[mine].append(village)
    return tuple(tuple(group) for group in groups)


def _is_better(candidate: tuple[float, Action], incumbent: tuple[float, Action]) -> bool:
    """Order by value, then prefer the lexicographically smaller action."""

    if candidate[0] != incumbent[0]:
        return candidate[0] > incumbent[0]
    return candidate[1] < incumbent[1]


def solve_optimal_action(
    action_space: Sequence[int],
    workers_per_village: Sequence[int],
    productivity_per_mine: Sequence[float],
) -> Action:
    """Find the joint action maximizing total mineral output.

    Villages are processed in index order. No village after ``i`` can reach
    mine ``i``, so once village ``i`` has chosen, mine ``i``'s worker total is
    final and its output is added to the running value. The search state is
    the tuple of worker totals on the mines not yet finalized; for each state
    only the best partial action is kept.

    Parameters
    ----------
    action_space : Sequence[int]
        Number of reachable mines per village.
    workers_per_village : Sequence[int]
        Workers sent by each village.
    productivity_per_mine : Sequence[float]
        Productivity of each mine.

    Returns
    -------
    tuple[int, ...]
        The lexicographically first joint action with maximal total output.
    """

    n_villages = len(action_space)
    n_mines = len(productivity_per_mine)

    # Worker totals on mines village..n_mines-1 -> (finalized output, action prefix).
    frontier: dict[tuple[int, ...], tuple[float, Action]] = {(0,) * n_mines: (0.0, ())}
    for village, size in enumerate(action_space):
        workers = workers_per_village[village]
        next_frontier: dict[tuple[int, ...], tuple[float, Action]] = {}
        for totals, (value, prefix) in frontier.items():
            for local in range(size):
                updated = list(totals)
                updated[local] += workers
                candidate = (
                    value + mine_output(productivity_per_mine[village], updated[0]),
                    prefix + (local,),
                )
                key = tuple(updated[1:])
                incumbent = next_frontier.get(key)
                if incumbent is None or _is_better(candidate, incumbent):
                    next_frontier[key] = candidate
        frontier = next_frontier

    best: tuple[float, Action] | None = None
    for totals, (value, prefix) in frontier.items():
        for offset, workers in enumerate(totals):
            value += mine_output(productivity_per_mine[n_villages + offset], workers)
        candidate = (value, prefix)
        if best is None or _is_better(candidate, best):
            best = candidate

    assert best is not None
    logger.debug(
        "optimal mining action for %d villages / %d mines: %s (output %.6f)",
        n_villages,
        n_mines,
        best[1],
        best[0],
    )
    return best[1]


class MiningBandit:
    """Factored Bernoulli bandit of villages sending workers to mines.

    Parameters
    ----------
    action_space : Sequence[int]
        One entry per village: how many mines it can reach. Village ``i``
        reaches mines ``i .. i + action_space[i] - 1``.
    workers_per_village : Sequence[int]
        How many workers each village sends.
    productivity_per_mine : Sequence[float]
        Productivity factor of each mine. Must have one entry per mine implied
        by ``action_space``.
    rng : numpy.random.Generator | int | None, optional
        Generator, or seed for one, used by :meth:`sample_r`.

    Raises
    ------
    ValueError
        If vector lengths do not match the action space, any worker count or
        productivity is negative, or no joint action produces any output.

    Notes
    -----
    Everything is fixed at construction, including the optimal action and the
    normalization constant. :meth:`sample_r` is the only method that mutates
    the instance (its reward buffer and generator); use one instance per
    concurrent consumer.
    """

    def __init__(
        self,
        action_space: Sequence[int],
        workers_per_village: Sequence[int],
        productivity_per_mine: Sequence[float],
        *,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        self._action_space = validate_action_space(action_space)
        n_villages = len(self._action_space)
        n_mines = count_mines(self._action_space)

        if len(workers_per_village) != n_villages:
            raise ValueError(
                f"workers_per_village has {len(workers_per_village)} entries, "
                f"expected one per village ({n_villages})"
            )
        if len(productivity_per_mine) != n_mines:
            raise ValueError(
                f"productivity_per_mine has {len(productivity_per_mine)} entries, "
                f"expected one per mine ({n_mines})"
            )

        self._workers = tuple(int(w) for w in workers_per_village)
        if any(w < 0 for w in self._workers):
            raise ValueError("workers_per_village must be non-negative")
        self._productivity = tuple(float(p) for p in productivity_per_mine)
        if any(not math.isfinite(p) or p < 0.0 for p in self._productivity):
            raise ValueError("productivity_per_mine must be finite and non-negative")

        self._villages_per_mine = build_villages_per_mine(self._action_space)
        self._optimal = solve_optimal_action(self._action_space, self._workers, self._productivity)
        # Recomputed with the same summation as get_regret so the optimum has zero regret.
        self._reward_norm = self._sum_outputs(self._optimal)
        if self._reward_norm <= 0.0:
            raise ValueError("no joint action produces any minerals; cannot normalize rewards")

        self._rewards = np.zeros(n_mines, dtype=float)
        self._rng = np.random.default_rng(rng)

    @property
    def n_villages(self) -> int:
        """Return number of villages (agents)."""

        return len(self._action_space)

    @property
    def n_mines(self) -> int:
        """Return number of mines (local reward functions)."""

        return len(self._productivity)

    @property
    def workers_per_village(self) -> tuple[int, ...]:
        return self._workers

    @property
    def productivity_per_mine(self) -> tuple[float, ...]:
        return self._productivity

    @property
    def reward_norm(self) -> float:
        """Return the maximum total deterministic output."""

        return self._reward_norm

    def get_a(self) -> Action:
        """Return the joint action space."""

        return self._action_space

    def get_optimal_action(self) -> Action:
        """Return the stored optimal joint action."""

        return self._optimal

    def get_groups(self) -> tuple[PartialKeys, ...]:
        """Return, for each mine, the villages connected to it."""

        return self._villages_per_mine

    def mine_outputs(self, action: Sequence[int]) -> tuple[float, ...]:
        """Return the deterministic output of every mine under a joint action.

        Raises
        ------
        ValueError
            If ``action`` is not a valid joint action.
        """

        return self._mine_outputs(validate_joint_action(action, self._action_space))

    def total_output(self, action: Sequence[int]) -> float:
        """Return the total deterministic output of a joint action."""

        return self._sum_outputs(validate_joint_action(action, self._action_space))

    def sample_r(self, action: Sequence[int]) -> np.ndarray:
        """Sample one Bernoulli reward per mine.

        Each mine's output is divided by :attr:`reward_norm` and used as its
        success probability. Probabilities are not clamped.

        Parameters
        ----------
        action : Sequence[int]
            Joint action of all villages.

        Returns
        -------
        numpy.ndarray
            Read-only view of the internal reward buffer, holding ``0.0`` or
            ``1.0`` per mine. Its contents are overwritten by the next call;
            copy it to keep it.

        Raises
        ------
        ValueError
            If ``action`` is not a valid joint action.
        """

        outputs = self._mine_outputs(validate_joint_action(action, self._action_space))
        probabilities = np.asarray(outputs, dtype=float) / self._reward_norm
        self._rewards[:] = self._rng.random(self.n_mines) < probabilities

        view = self._rewards.view()
        view.flags.writeable = False
        return view

    def get_regret(self, action: Sequence[int]) -> float:
        """Return the deterministic regret of a joint action.

        This bypasses the Bernoulli sampling and does not touch the generator.

        Raises
        ------
        ValueError
            If ``action`` is not a valid joint action.
        """

        return self._reward_norm - self.total_output(action)

    def get_deterministic_rules(self) -> list[QFunctionRule]:
        """Return the true per-mine rewards as local rules.

        For every mine and every combination of local actions of the villages
        connected to it, one rule maps that partial action to the mine's
        output. Exactly one rule per mine matches any joint action, so
        maximizing the sum of matching rules is equivalent to finding the
        optimal action of the bandit. Rules are neither normalized nor
        sampled.
        """

        rules: list[QFunctionRule] = []
        for mine, villages in enumerate(self._villages_per_mine):
            productivity = self._productivity[mine]
            alphabets = [range(self._action_space[village]) for village in villages]
            for local_actions in itertools.product(*alphabets):
                workers = 0
                for village, local in zip(villages, local_actions):
                    if village + local == mine:
                        workers += self._workers[village]
                rules.append(
                    QFunctionRule(
                        action=PartialAction(keys=villages, values=tuple(local_actions)),
                        value=mine_output(productivity, workers),
                    )
                )
        return rules

    def _mine_outputs(self, action: Action) -> tuple[float, ...]:
        totals = [0] * self.n_mines
        for village, local in enumerate(action):
            totals[village + local] += self._workers[village]
        return tuple(mine_output(p, w) for p, w in zip(self._productivity, totals))

    def _sum_outputs(self, action: Action) -> float:
        # Fixed left-to-right order; builtin sum() may compensate and differ in the last bit.
        total = 0.0
        for value in self._mine_outputs(action):
            total += value
        return total

    def __repr__(self) -> str:
        return (
            f"MiningBandit(n_villages={self.n_villages}, n_mines={self.n_mines}, "
            f"reward_norm={self._reward_norm:.6g})"
        )


def make_mining_parameters(seed: int) -> tuple[Action, tuple[int, ...], tuple[float, ...]]:
    """Sample the parameters of a random :class:`MiningBandit`.

    Values are drawn uniformly, in this order, from:

    - villages:              [5, 15]
    - workers per village:   [1, 5]
    - mines per village:     [2, 4], with the last village forced to 4
    - productivity per mine: [0, 0.5), for ``villages + 3`` mines

    Forcing the last village to reach 4 mines fixes the mine count at
    ``villages + 3``, since no earlier village can reach further.

    Parameters
    ----------
    seed : int
        Seed for the parameter generator.

    Returns
    -------
    tuple
        ``(action_space, workers_per_village, productivity_per_mine)`` in the
        order of the :class:`MiningBandit` constructor.
    """

    rng = np.random.default_rng(seed)

    n_villages = int(rng.integers(VILLAGE_COUNT_RANGE[0], VILLAGE_COUNT_RANGE[1], endpoint=True))
    workers = rng.integers(
        WORKERS_PER_VILLAGE_RANGE[0],
        WORKERS_PER_VILLAGE_RANGE[1],
        size=n_villages,
        endpoint=True,
    )
    mines_per_village = rng.integers(
        MINES_PER_VILLAGE_RANGE[0],
        MINES_PER_VILLAGE_RANGE[1],
        size=n_villages,
        endpoint=True,
    )
    mines_per_village[-1] = LAST_VILLAGE_MINES

    n_mines = n_villages + LAST_VILLAGE_MINES - 1
    productivity = rng.uniform(PRODUCTIVITY_RANGE[0], PRODUCTIVITY_RANGE[1], size=n_mines)

    return (
        tuple(int(size) for size in mines_per_village),
        tuple(int(w) for w in workers),
        tuple(float(p) for p in productivity),
    )


def create_mining_bandit(
    *,
    action_space: Sequence[int],
    workers_per_village: Sequence[int],
    productivity_per_mine: Sequence[float],
    rng_seed: int | None = None,
) -> MiningBandit:
    """Factory used by plugin discovery for explicit parameters."""

    return MiningBandit(
        action_space,
        workers_per_village,
        productivity_per_mine,
        rng=rng_seed,
    )


def create_random_mining_bandit(*, seed: int, rng_seed: int | None = None) -> MiningBandit:
    """Factory used by plugin discovery for seeded random instances.

    Parameters
    ----------
    seed : int
        Seed passed to :func:`make_mining_parameters`.
    rng_seed : int | None, optional
        Seed for reward sampling. Defaults to ``seed``.
    """

    action_space, workers, productivity = make_mining_parameters(seed)
    return MiningBandit(
        action_space,
        workers,
        productivity,
        rng=seed if rng_seed is None else rng_seed,
    )


PLUGIN_MANIFESTS = [
    ComponentManifest(
        kind="problem",
        component_id="mining_bandit",
        factory=create_mining_bandit,
        description="Mining factored bandit with explicit parameters",
    ),
    ComponentManifest(
        kind="problem",
        component_id="random_mining_bandit",
        factory=create_random_mining_bandit,
        description="Mining factored bandit with parameters sampled from a seed",
    ),
]
