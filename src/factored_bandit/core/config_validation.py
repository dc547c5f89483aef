"""Strict validation helpers for declarative benchmark configs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def validate_allowed_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    allowed_keys: Iterable[str],
) -> None:
    """Reject keys that are not in ``allowed_keys``.

    Parameters
    ----------
    mapping : Mapping[str, Any]
        Configuration mapping to validate.
    field_name : str
        Config path used in error messages, e.g. ``"config.problem"``.
    allowed_keys : Iterable[str]
        Accepted key names.

    Raises
    ------
    ValueError
        If unknown keys are present.
    """

    allowed = {str(key) for key in allowed_keys}
    unknown = sorted(str(key) for key in mapping if str(key) not in allowed)
    if unknown:
        raise ValueError(f"{field_name} has unknown keys: {unknown}")


def validate_required_keys(
    mapping: Mapping[str, Any],
    *,
    field_name: str,
    required_keys: Iterable[str],
) -> None:
    """Reject mappings missing any of ``required_keys``.

    Raises
    ------
    ValueError
        If required keys are missing.
    """

    missing = sorted(str(key) for key in required_keys if key not in mapping)
    if missing:
        raise ValueError(f"{field_name} is missing required keys: {missing}")


def require_mapping(raw: Any, *, field_name: str) -> dict[str, Any]:
    """Require an object value in a config."""

    if not isinstance(raw, dict):
        raise ValueError(f"{field_name} must be an object")
    return raw


def require_sequence(raw: Any, *, field_name: str) -> list[Any]:
    """Require an array value in a config."""

    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"{field_name} must be an array")
    return list(raw)


def coerce_non_empty_str(raw: Any, *, field_name: str) -> str:
    """Coerce a non-empty string from a config scalar."""

    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return raw.strip()


def coerce_non_negative_int(raw: Any, *, field_name: str) -> int:
    """Coerce a non-negative integer from a config scalar.

    Booleans are rejected even though they are ``int`` subclasses.
    """

    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    if raw < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return raw


__all__ = [
    "coerce_non_empty_str",
    "coerce_non_negative_int",
    "require_mapping",
    "require_sequence",
    "validate_allowed_keys",
    "validate_required_keys",
]
