"""Core action types and config helpers."""

from .config_validation import validate_allowed_keys, validate_required_keys
from .types import (
    Action,
    PartialAction,
    PartialKeys,
    QFunctionRule,
    evaluate_rules,
    iter_joint_actions,
    joint_action_space_size,
    validate_action_space,
    validate_joint_action,
)

__all__ = [
    "Action",
    "PartialAction",
    "PartialKeys",
    "QFunctionRule",
    "evaluate_rules",
    "iter_joint_actions",
    "joint_action_space_size",
    "validate_action_space",
    "validate_allowed_keys",
    "validate_joint_action",
    "validate_required_keys",
]
