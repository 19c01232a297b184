"""Resolver/planner: validate a dependency graph, order it, and merge settings."""

from __future__ import annotations

import heapq
import logging
from concurrent.futures import ThreadPoolExecutor

from buildplan.analysis.dependency_graph import DependencyGraphBuilder, check_acyclic, find_cycle
from buildplan.analysis.graph_models import DependencyGraph
from buildplan.analysis.settings_merge import MergeState, merge_settings
from buildplan.errors import CyclicDependencyError
from buildplan.models import BuildPlan, Configuration, PlanEntry
from buildplan.registry import ModuleRegistry, TargetRegistry

logger = logging.getLogger(__name__)


def topological_order(graph: DependencyGraph) -> list[str]:
    """Kahn's algorithm; among ready modules the smallest name goes first."""
    pending = {name: len(graph.forward.get(name, [])) for name in graph.nodes}
    ready = [name for name, count in pending.items() if count == 0]
    heapq.heapify(ready)

    order: list[str] = []
    while ready:
        name = heapq.heappop(ready)
        order.append(name)
        for dependent in graph.reverse.get(name, []):
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) != len(graph.nodes):
        raise CyclicDependencyError(find_cycle(graph) or sorted(set(graph.nodes) - set(order)))
    return order


def resolve(graph: DependencyGraph, configuration: Configuration) -> BuildPlan:
    """Turn a dependency graph into an immutable BuildPlan."""
    check_acyclic(graph)
    order = topological_order(graph)
    position = {name: i for i, name in enumerate(order)}
    build_type = graph.target.build_type

    states: dict[str, MergeState] = {}
    entries: list[PlanEntry] = []
    for name in order:
        module = graph.nodes[name]
        deps = sorted(graph.dependencies_of(name), key=position.__getitem__)
        own = module.effective_settings(configuration, build_type)
        states[name] = merge_settings(module, own, [states[d] for d in deps])
        entries.append(PlanEntry(
            name=name,
            sources=tuple(dict.fromkeys(module.sources)),
            settings=states[name].freeze(),
        ))
        logger.debug("merged %s over %d dependencies", name, len(deps))

    return BuildPlan(
        target=graph.target.name,
        build_type=build_type,
        configuration=configuration,
        entries=tuple(entries),
    )


class Planner:
    """Resolves targets against a pair of registries.

    Creating a planner ends the load phase: both registries are frozen, so
    concurrent ``plan`` calls only ever read them.
    """

    def __init__(self, modules: ModuleRegistry, targets: TargetRegistry):
        self.modules = modules
        self.targets = targets
        self.targets.freeze()
        self.modules.freeze()
        self._builder = DependencyGraphBuilder(modules)

    def graph(self, target_name: str) -> DependencyGraph:
        return self._builder.build(self.targets.lookup(target_name))

    def plan(self, target_name: str, configuration: Configuration) -> BuildPlan:
        plan = resolve(self.graph(target_name), configuration)
        logger.info("resolved %s [%s]: %d modules",
                    target_name, configuration.value, len(plan.entries))
        return plan

    def plan_many(
        self,
        target_names: list[str],
        configuration: Configuration,
        max_workers: int = 4,
    ) -> dict[str, BuildPlan]:
        """Resolve several targets in parallel; the first error propagates."""
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {
                name: pool.submit(self.plan, name, configuration)
                for name in dict.fromkeys(target_names)
            }
            return {name: future.result() for name, future in futures.items()}
