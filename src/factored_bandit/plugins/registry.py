"""Problem manifests and auto-discovery registry.

Benchmark problems advertise themselves through a module-level
``PLUGIN_MANIFESTS`` list. The registry scans a package for those lists so that
configs can refer to problems by a stable ID instead of an import path.
"""

from __future__ import annotations

from dataclasses import dataclass
import importlib
import pkgutil
from typing import Any, Callable, Literal

ComponentKind = Literal["problem"]


@dataclass(frozen=True, slots=True)
class ComponentManifest:
    """Manifest for a discoverable component.

    Parameters
    ----------
    kind : {"problem"}
        Component category.
    component_id : str
        Stable identifier unique within ``kind``.
    factory : Callable[..., Any]
        Callable that creates the component instance from keyword arguments.
    version : str, optional
        Semantic version label for the manifest.
    description : str, optional
        Human-readable component summary.
    """

    kind: ComponentKind
    component_id: str
    factory: Callable[..., Any]
    version: str = "1.0.0"
    description: str = ""


class PluginRegistry:
    """Registry of component manifests keyed by ``(kind, component_id)``."""

    def __init__(self) -> None:
        self._manifests: dict[tuple[ComponentKind, str], ComponentManifest] = {}

    def register(self, manifest: ComponentManifest) -> None:
        """Register one component manifest.

        Registering an identical manifest twice is a no-op, which keeps
        repeated discovery of the same package idempotent.

        Raises
        ------
        ValueError
            If a different manifest already exists for the same key.
        """

        key = (manifest.kind, manifest.component_id)
        existing = self._manifests.get(key)
        if existing is None:
            self._manifests[key] = manifest
            return

        if existing != manifest:
            raise ValueError(
                "manifest conflict for "
                f"{manifest.kind}:{manifest.component_id}; already registered"
            )

    def get(self, kind: ComponentKind, component_id: str) -> ComponentManifest:
        """Return a manifest by key.

        Raises
        ------
        KeyError
            If manifest is not registered.
        """

        try:
            return self._manifests[(kind, component_id)]
        except KeyError:
            known = sorted(cid for k, cid in self._manifests if k == kind)
            raise KeyError(f"unknown {kind} component {component_id!r}; known: {known}") from None

    def list(self, kind: ComponentKind | None = None) -> tuple[ComponentManifest, ...]:
        """List registered manifests sorted by kind and ID."""

        manifests = tuple(self._manifests.values())
        if kind is not None:
            manifests = tuple(item for item in manifests if item.kind == kind)

        return tuple(sorted(manifests, key=lambda item: (item.kind, item.component_id)))

    def create(self, kind: ComponentKind, component_id: str, **kwargs: Any) -> Any:
        """Create a component instance from its manifest factory."""

        manifest = self.get(kind, component_id)
        return manifest.factory(**kwargs)

    def create_problem(self, component_id: str, **kwargs: Any) -> Any:
        """Create a problem component by ID."""

        return self.create("problem", component_id, **kwargs)

    def discover(self, package_name: str) -> tuple[ComponentManifest, ...]:
        """Discover and register manifests in a package tree.

        Parameters
        ----------
        package_name : str
            Package root to scan. Every module may define ``PLUGIN_MANIFESTS``.

        Returns
        -------
        tuple[ComponentManifest, ...]
            Manifests discovered in the package.

        Raises
        ------
        TypeError
            If a module's ``PLUGIN_MANIFESTS`` holds anything but manifests.
        """

        discovered: list[ComponentManifest] = []
        package = importlib.import_module(package_name)

        modules = [package]
        if hasattr(package, "__path__"):
            for module_info in pkgutil.walk_packages(package.__path__, prefix=package.__name__ + "."):
                modules.append(importlib.import_module(module_info.name))

        for module in modules:
            manifests = getattr(module, "PLUGIN_MANIFESTS", ())
            for manifest in manifests:
                if not isinstance(manifest, ComponentManifest):
                    raise TypeError(
                        f"{module.__name__}.PLUGIN_MANIFESTS must contain ComponentManifest objects"
                    )
                self.register(manifest)
                discovered.append(manifest)

        return tuple(discovered)


def build_default_registry() -> PluginRegistry:
    """Build a registry with all built-in problems discovered."""

    registry = PluginRegistry()
    registry.discover("factored_bandit.problems")
    return registry
