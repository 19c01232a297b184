"""Shared builders for tests."""

from buildplan.models import BuildSettings, BuildType, Module, SettingKey, Target, parse_definition
from buildplan.registry import ModuleRegistry, TargetRegistry


def make_settings(include_paths=(), link_libraries=(), definitions=(), **scalars):
    return BuildSettings(
        include_paths=tuple(include_paths),
        link_libraries=tuple(link_libraries),
        definitions=tuple(parse_definition(d) for d in definitions),
        scalars=tuple((SettingKey(k), v) for k, v in scalars.items()),
    )


def make_module(name, deps=(), sources=None, overrides=(), settings=None, **setting_kwargs):
    return Module(
        name=name,
        sources=tuple(sources if sources is not None else [f"{name}/{name}.cpp"]),
        dependencies=tuple(deps),
        settings=settings or make_settings(**setting_kwargs),
        overrides=frozenset(overrides),
    )


def make_registries(*modules, targets=()):
    registry = ModuleRegistry()
    for module in modules:
        registry.register(module)
    target_registry = TargetRegistry(registry)
    for target in targets:
        target_registry.register(target)
    return registry, target_registry


def make_target(name, *modules, build_type=BuildType.GAME):
    return Target(name=name, build_type=build_type, modules=tuple(modules))
