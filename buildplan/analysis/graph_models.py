"""Data models for the module dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field

from buildplan.models import Module, Target


@dataclass
class DependencyEdge:
    source: str  # dependent module
    target: str  # module it depends on


@dataclass
class DependencyGraph:
    target: Target
    nodes: dict[str, Module] = field(default_factory=dict)
    edges: list[DependencyEdge] = field(default_factory=list)
    forward: dict[str, list[str]] = field(default_factory=dict)  # module -> [dependencies]
    reverse: dict[str, list[str]] = field(default_factory=dict)  # module -> [dependents]

    @property
    def roots(self) -> tuple[str, ...]:
        return self.target.modules

    def dependencies_of(self, name: str) -> list[str]:
        return self.forward.get(name, [])

    def dependents_of(self, name: str) -> list[str]:
        return self.reverse.get(name, [])
