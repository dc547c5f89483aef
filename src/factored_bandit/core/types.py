"""Joint-action and local reward rule types for factored bandits.

A factored bandit decomposes its reward into local terms, each depending on a
subset of agents. The types here describe joint actions over all agents,
partial actions over a subset of agents, and the value rules that external
maximizers consume.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

Action = tuple[int, ...]
"""Joint action, or action space when each entry is an alphabet size."""

PartialKeys = tuple[int, ...]
"""Strictly increasing agent indices."""


@dataclass(frozen=True, slots=True)
class PartialAction:
    """Local actions for a subset of agents.

    Parameters
    ----------
    keys : tuple[int, ...]
        Strictly increasing agent indices.
    values : tuple[int, ...]
        Local action index of each agent in ``keys``.

    Raises
    ------
    ValueError
        If lengths differ or keys are not strictly increasing.
    """

    keys: PartialKeys
    values: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.keys) != len(self.values):
            raise ValueError("partial action keys and values must have the same length")
        for left, right in zip(self.keys, self.keys[1:]):
            if left >= right:
                raise ValueError("partial action keys must be strictly increasing")

    def matches(self, action: Sequence[int]) -> bool:
        """Return whether a full joint action agrees with this partial action."""

        return all(action[key] == value for key, value in zip(self.keys, self.values))


@dataclass(frozen=True, slots=True)
class QFunctionRule:
    """Value contributed by one partial action to a factored reward.

    Parameters
    ----------
    action : PartialAction
        Partial joint action the rule applies to.
    value : float
        Reward contribution when ``action`` matches.
    """

    action: PartialAction
    value: float


def evaluate_rules(rules: Iterable[QFunctionRule], action: Sequence[int]) -> float:
    """Sum the values of every rule matching a joint action.

    Parameters
    ----------
    rules : Iterable[QFunctionRule]
        Rules to evaluate.
    action : Sequence[int]
        Full joint action.

    Returns
    -------
    float
        Total value of matching rules.
    """

    total = 0.0
    for rule in rules:
        if rule.action.matches(action):
            total += rule.value
    return total


def validate_action_space(action_space: Sequence[int]) -> Action:
    """Normalize an action space into a tuple of positive alphabet sizes.

    Raises
    ------
    ValueError
        If the space is empty or any agent has fewer than one action.
    """

    normalized = tuple(int(size) for size in action_space)
    if len(normalized) == 0:
        raise ValueError("action space must contain at least one agent")
    for agent, size in enumerate(normalized):
        if size < 1:
            raise ValueError(f"agent {agent} must have at least one action, got {size}")
    return normalized


def validate_joint_action(action: Sequence[int], action_space: Sequence[int]) -> Action:
    """Check a joint action against an action space.

    Parameters
    ----------
    action : Sequence[int]
        One local action index per agent.
    action_space : Sequence[int]
        Alphabet size per agent.

    Returns
    -------
    tuple[int, ...]
        The joint action as a tuple of ints.

    Raises
    ------
    ValueError
        If the length is wrong or any index is outside its agent's alphabet.
    """

    normalized = tuple(int(a) for a in action)
    if len(normalized) != len(action_space):
        raise ValueError(
            f"joint action has {len(normalized)} entries, expected {len(action_space)}"
        )
    for agent, (a, size) in enumerate(zip(normalized, action_space)):
        if a < 0 or a >= size:
            raise ValueError(f"action {a} is out of range for agent {agent} with {size} actions")
    return normalized


def joint_action_space_size(action_space: Sequence[int]) -> int:
    """Return the number of joint actions in an action space."""

    size = 1
    for alphabet in action_space:
        size *= int(alphabet)
    return size


def iter_joint_actions(action_space: Sequence[int]) -> Iterator[Action]:
    """Enumerate joint actions in lexicographic order.

    Notes
    -----
    The number of joint actions grows exponentially with the number of
    agents; this is meant for small spaces only.
    """

    return itertools.product(*(range(int(size)) for size in action_space))


__all__ = [
    "Action",
    "PartialAction",
    "PartialKeys",
    "QFunctionRule",
    "evaluate_rules",
    "iter_joint_actions",
    "joint_action_space_size",
    "validate_action_space",
    "validate_joint_action",
]
