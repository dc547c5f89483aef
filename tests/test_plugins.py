"""Tests for problem manifests and auto-discovery."""

from __future__ import annotations

import sys
import types

import pytest

from factored_bandit.plugins import ComponentManifest, PluginRegistry, build_default_registry
from factored_bandit.problems import MiningBandit, make_mining_parameters


def test_default_registry_discovers_mining_problems() -> None:
    """Default registry should include both mining problem factories."""

    registry = build_default_registry()
    problem_ids = {manifest.component_id for manifest in registry.list(kind="problem")}

    assert {"mining_bandit", "random_mining_bandit"}.issubset(problem_ids)


def test_registry_creates_mining_bandits() -> None:
    """Registry factories should construct usable instances."""

    registry = build_default_registry()

    explicit = registry.create_problem(
        "mining_bandit",
        action_space=[4, 4],
        workers_per_village=[3, 2],
        productivity_per_mine=[0.1] * 5,
        rng_seed=1,
    )
    seeded = registry.create_problem("random_mining_bandit", seed=4)

    assert isinstance(explicit, MiningBandit)
    assert explicit.get_optimal_action() == (0, 0)
    assert isinstance(seeded, MiningBandit)
    assert seeded.get_a() == make_mining_parameters(4)[0]


def test_random_factory_defaults_sampling_seed_to_instance_seed() -> None:
    """Seeded instances should sample reproducibly without an explicit rng seed."""

    registry = build_default_registry()
    left = registry.create_problem("random_mining_bandit", seed=8)
    right = registry.create_problem("random_mining_bandit", seed=8)
    action = left.get_optimal_action()

    assert left.sample_r(action).tolist() == right.sample_r(action).tolist()


def test_registry_rejects_conflicting_manifest() -> None:
    """Registering a different manifest under the same key should fail."""

    registry = PluginRegistry()
    registry.register(ComponentManifest(kind="problem", component_id="x", factory=lambda: 1))

    with pytest.raises(ValueError, match="manifest conflict"):
        registry.register(ComponentManifest(kind="problem", component_id="x", factory=lambda: 2))


def test_registry_reports_unknown_component() -> None:
    """Unknown IDs should raise a KeyError naming known components."""

    registry = build_default_registry()

    with pytest.raises(KeyError, match="mining_bandit"):
        registry.create_problem("no_such_problem")


def test_discover_rejects_non_manifest_entries(monkeypatch) -> None:
    """Modules must expose only ComponentManifest objects."""

    module = types.ModuleType("fake_problem_module")
    module.PLUGIN_MANIFESTS = ["not a manifest"]
    monkeypatch.setitem(sys.modules, "fake_problem_module", module)

    with pytest.raises(TypeError, match="must contain ComponentManifest"):
        PluginRegistry().discover("fake_problem_module")
