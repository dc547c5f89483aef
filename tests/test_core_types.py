"""Tests for joint-action and local rule types."""

from __future__ import annotations

import pytest

from factored_bandit.core import (
    PartialAction,
    QFunctionRule,
    evaluate_rules,
    iter_joint_actions,
    joint_action_space_size,
    validate_action_space,
    validate_joint_action,
)


def test_partial_action_matches_only_its_keys() -> None:
    """A partial action should ignore agents outside its keys."""

    partial = PartialAction(keys=(1, 3), values=(2, 0))

    assert partial.matches((9, 2, 9, 0))
    assert not partial.matches((0, 2, 0, 1))


def test_partial_action_rejects_malformed_keys() -> None:
    """Keys must be strictly increasing and aligned with values."""

    with pytest.raises(ValueError, match="same length"):
        PartialAction(keys=(0, 1), values=(0,))
    with pytest.raises(ValueError, match="strictly increasing"):
        PartialAction(keys=(1, 1), values=(0, 0))


def test_evaluate_rules_sums_matching_values() -> None:
    """Only rules whose partial action matches should contribute."""

    rules = [
        QFunctionRule(PartialAction((0,), (0,)), 1.5),
        QFunctionRule(PartialAction((0,), (1,)), 10.0),
        QFunctionRule(PartialAction((0, 1), (0, 2)), 0.25),
    ]

    assert evaluate_rules(rules, (0, 2)) == pytest.approx(1.75)
    assert evaluate_rules(rules, (1, 0)) == pytest.approx(10.0)
    assert evaluate_rules([], (0, 0)) == 0.0


def test_validate_joint_action_reports_bad_entries() -> None:
    """Joint actions must have one in-range entry per agent."""

    assert validate_joint_action([1, 0], (2, 3)) == (1, 0)

    with pytest.raises(ValueError, match="expected 2"):
        validate_joint_action((0,), (2, 3))
    with pytest.raises(ValueError, match="out of range for agent 1"):
        validate_joint_action((0, 3), (2, 3))
    with pytest.raises(ValueError, match="out of range for agent 0"):
        validate_joint_action((-1, 0), (2, 3))


def test_validate_action_space_requires_positive_sizes() -> None:
    """Every agent needs at least one action."""

    assert validate_action_space([2, 4]) == (2, 4)
    with pytest.raises(ValueError, match="at least one agent"):
        validate_action_space([])
    with pytest.raises(ValueError, match="agent 1 must have at least one action"):
        validate_action_space([2, 0])


def test_iter_joint_actions_is_lexicographic() -> None:
    """Enumeration should cover the space in lexicographic order."""

    actions = list(iter_joint_actions((2, 3)))

    assert len(actions) == joint_action_space_size((2, 3)) == 6
    assert actions == sorted(actions)
    assert actions[0] == (0, 0)
    assert actions[-1] == (1, 2)
