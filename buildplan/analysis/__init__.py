"""Graph construction, resolution, and settings merge."""

from __future__ import annotations

from buildplan.analysis.dependency_graph import DependencyGraphBuilder, check_acyclic, find_cycle
from buildplan.analysis.graph_models import DependencyEdge, DependencyGraph
from buildplan.analysis.planner import Planner, resolve, topological_order

__all__ = [
    "DependencyEdge",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "Planner",
    "check_acyclic",
    "find_cycle",
    "resolve",
    "topological_order",
]
