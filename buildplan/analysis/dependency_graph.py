"""Dependency graph builder: expands a target through the module registry, detects cycles."""

from __future__ import annotations

import logging
from collections import deque

from buildplan.analysis.graph_models import DependencyEdge, DependencyGraph
from buildplan.errors import CyclicDependencyError
from buildplan.models import Target
from buildplan.registry import ModuleRegistry, validate_target

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Build the dependency graph reachable from one target."""

    def __init__(self, modules: ModuleRegistry):
        self.modules = modules

    def build(self, target: Target) -> DependencyGraph:
        validate_target(target, self.modules)
        graph = DependencyGraph(target=target)

        queue = deque((name, target.name) for name in target.modules)
        while queue:
            name, referenced_by = queue.popleft()
            if name in graph.nodes:
                continue
            module = self.modules.lookup(name, referenced_by=referenced_by)
            graph.nodes[name] = module
            graph.forward.setdefault(name, [])
            graph.reverse.setdefault(name, [])
            for dep in module.dependencies:
                queue.append((dep, name))

        for name, module in graph.nodes.items():
            for dep in module.dependencies:
                self._add_edge(graph, name, dep)

        logger.debug("graph for %s: %d nodes, %d edges",
                     target.name, len(graph.nodes), len(graph.edges))
        return graph

    def _add_edge(self, graph: DependencyGraph, source: str, target: str) -> None:
        # Avoid duplicate edges
        if target in graph.forward[source]:
            return
        graph.edges.append(DependencyEdge(source=source, target=target))
        graph.forward[source].append(target)
        graph.reverse[target].append(source)


def find_cycle(graph: DependencyGraph) -> list[str] | None:
    """Return the first cycle found by DFS, or None for a DAG.

    Nodes and their dependencies are visited in name order and the cycle is
    rotated to start at its smallest member, so the report does not depend
    on declaration order.
    """
    visited: set[str] = set()
    rec_stack: set[str] = set()
    path: list[str] = []

    # Explicit stack of (node, remaining neighbours); no recursion
    for start in sorted(graph.nodes):
        if start in visited:
            continue
        visited.add(start)
        rec_stack.add(start)
        path.append(start)
        stack = [(start, iter(sorted(graph.forward.get(start, []))))]

        while stack:
            node, neighbors = stack[-1]
            for neighbor in neighbors:
                if neighbor in rec_stack:
                    return _normalise(path[path.index(neighbor):])
                if neighbor not in visited:
                    visited.add(neighbor)
                    rec_stack.add(neighbor)
                    path.append(neighbor)
                    stack.append((neighbor, iter(sorted(graph.forward.get(neighbor, [])))))
                    break
            else:
                stack.pop()
                path.pop()
                rec_stack.discard(node)
    return None


def check_acyclic(graph: DependencyGraph) -> None:
    cycle = find_cycle(graph)
    if cycle:
        raise CyclicDependencyError(cycle)


def _normalise(cycle: list[str]) -> list[str]:
    start = cycle.index(min(cycle))
    return cycle[start:] + cycle[:start]
