"""Tests for resolution: ordering, determinism, and the planner facade."""

import itertools

import pytest

from buildplan.analysis import DependencyGraphBuilder, Planner, resolve, topological_order
from buildplan.errors import (
    CyclicDependencyError,
    RegistrationClosedError,
    UnknownModuleError,
    UnknownTargetError,
)
from buildplan.exporter import emit
from buildplan.models import BuildType, Configuration, SettingKey

from tests.helpers import make_module, make_registries, make_settings, make_target


def _diamond():
    return [
        make_module("App", deps=["Render", "Audio"]),
        make_module("Render", deps=["Core", "Math"]),
        make_module("Audio", deps=["Core"]),
        make_module("Math", deps=["Core"]),
        make_module("Core"),
    ]


def _planner(*modules, targets):
    return Planner(*make_registries(*modules, targets=targets))


def _transitive(graph, name):
    seen = set()
    stack = list(graph.dependencies_of(name))
    while stack:
        dep = stack.pop()
        if dep not in seen:
            seen.add(dep)
            stack.extend(graph.dependencies_of(dep))
    return seen


class TestTopologicalOrder:
    def test_flat_target_sorted_by_name(self):
        registry, _ = make_registries(
            make_module("MainModule"), make_module("HackflightModule"), make_module("SocketModule"),
        )
        graph = DependencyGraphBuilder(registry).build(
            make_target("MulticopterSim", "MainModule", "HackflightModule", "SocketModule"),
        )
        assert topological_order(graph) == ["HackflightModule", "MainModule", "SocketModule"]

    def test_diamond(self):
        registry, _ = make_registries(*_diamond())
        graph = DependencyGraphBuilder(registry).build(make_target("T", "App"))
        assert topological_order(graph) == ["Core", "Audio", "Math", "Render", "App"]

    def test_dependencies_precede_dependents(self):
        registry, _ = make_registries(*_diamond())
        graph = DependencyGraphBuilder(registry).build(make_target("T", "App"))
        order = topological_order(graph)
        for name in order:
            for dep in _transitive(graph, name):
                assert order.index(dep) < order.index(name)

    def test_independent_of_registration_order(self):
        orders = set()
        for perm in itertools.permutations(_diamond()):
            registry, _ = make_registries(*perm)
            graph = DependencyGraphBuilder(registry).build(make_target("T", "App"))
            orders.add(tuple(topological_order(graph)))
        assert len(orders) == 1


class TestResolve:
    def test_plan_contents(self):
        registry, _ = make_registries(
            make_module("A", sources=["a.cpp", "a.cpp", "a.h"]),
            make_module("B", deps=["A"]),
        )
        graph = DependencyGraphBuilder(registry).build(make_target("T", "B", build_type=BuildType.SERVER))
        plan = resolve(graph, Configuration.SHIPPING)
        assert plan.target == "T"
        assert plan.build_type is BuildType.SERVER
        assert plan.configuration is Configuration.SHIPPING
        assert plan.order == ["A", "B"]
        assert plan.entry("A").sources == ("a.cpp", "a.h")

    def test_cycle_produces_no_plan(self):
        planner = _planner(
            make_module("A", deps=["B"]),
            make_module("B", deps=["C"]),
            make_module("C", deps=["A"]),
            targets=[make_target("T", "A")],
        )
        with pytest.raises(CyclicDependencyError) as exc:
            planner.plan("T", Configuration.DEBUG)
        assert exc.value.cycle == ["A", "B", "C"]

    def test_determinism(self):
        planner = _planner(*_diamond(), targets=[make_target("T", "App")])
        first = emit(planner.plan("T", Configuration.DEVELOPMENT))
        second = emit(planner.plan("T", Configuration.DEVELOPMENT))
        assert first == second


class TestPlanner:
    def test_freezes_registries(self):
        modules, targets = make_registries(make_module("A"), targets=[make_target("T", "A")])
        Planner(modules, targets)
        with pytest.raises(RegistrationClosedError):
            modules.register(make_module("B"))

    def test_unknown_target(self):
        planner = _planner(make_module("A"), targets=[])
        with pytest.raises(UnknownTargetError):
            planner.plan("Nope", Configuration.DEBUG)

    def test_deferred_target_revalidated_at_resolve(self):
        from buildplan.registry import ModuleRegistry, TargetRegistry
        modules = ModuleRegistry()
        targets = TargetRegistry(modules, defer_validation=True)
        targets.register(make_target("T", "Ghost"))
        planner = Planner(modules, targets)
        with pytest.raises(UnknownModuleError) as exc:
            planner.plan("T", Configuration.DEBUG)
        assert exc.value.name == "Ghost"

    def test_plan_many_in_parallel(self):
        planner = _planner(
            *_diamond(),
            targets=[make_target("Game", "App"), make_target("Tools", "Math", "Audio")],
        )
        plans = planner.plan_many(["Game", "Tools", "Game"], Configuration.DEBUG, max_workers=2)
        assert list(plans) == ["Game", "Tools"]
        assert plans["Tools"].order == ["Core", "Audio", "Math"]
        assert emit(plans["Game"]) == emit(planner.plan("Game", Configuration.DEBUG))

    def test_plan_many_propagates_errors(self):
        planner = _planner(make_module("A"), targets=[make_target("T", "A")])
        with pytest.raises(UnknownTargetError):
            planner.plan_many(["T", "Missing"], Configuration.DEBUG)

    def test_configuration_overlay(self):
        from buildplan.models import Module
        module = Module(
            name="Net",
            settings=make_settings(definitions=["LOG=0"], optimization="O2"),
            configuration_settings={
                Configuration.DEBUG: make_settings(definitions=["LOG=1"], optimization="O0"),
            },
            build_type_settings={
                BuildType.EDITOR: make_settings(include_paths=["Editor"]),
            },
        )
        planner = _planner(
            module,
            targets=[make_target("G", "Net"), make_target("E", "Net", build_type=BuildType.EDITOR)],
        )
        debug = planner.plan("G", Configuration.DEBUG).entry("Net").settings
        shipping = planner.plan("G", Configuration.SHIPPING).entry("Net").settings
        editor = planner.plan("E", Configuration.SHIPPING).entry("Net").settings
        assert debug.definition("LOG") == "1"
        assert debug.scalar(SettingKey.OPTIMIZATION) == "O0"
        assert shipping.definition("LOG") == "0"
        assert shipping.scalar(SettingKey.OPTIMIZATION) == "O2"
        assert editor.include_paths == ("Editor",)
        assert shipping.include_paths == ()

    def test_long_chain_plans_in_dependency_order(self):
        names = [f"Layer{i:04d}" for i in range(2000)]
        modules = [make_module(name, deps=[names[i + 1]] if i + 1 < len(names) else [])
                   for i, name in enumerate(names)]
        planner = _planner(*modules, targets=[make_target("Deep", names[0])])
        plan = planner.plan("Deep", Configuration.DEVELOPMENT)
        assert plan.order == list(reversed(names))
