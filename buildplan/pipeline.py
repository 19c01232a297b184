"""Load -> register -> graph -> resolve -> emit."""

from __future__ import annotations

import logging

from buildplan.analysis import Planner
from buildplan.exporter import write_plan
from buildplan.loader import load_declarations, populate
from buildplan.models import BuildPlan, ResolverConfig
from buildplan.registry import ModuleRegistry, TargetRegistry

logger = logging.getLogger(__name__)


def load_workspace(config: ResolverConfig) -> Planner:
    """Load phase: read declarations and register them, then freeze into a planner."""
    decls = load_declarations(config.source)
    modules = ModuleRegistry()
    targets = TargetRegistry(modules, defer_validation=config.defer_validation)
    populate(decls, modules, targets, external_modules=config.external_modules)
    return Planner(modules, targets)


def run_resolve(config: ResolverConfig, target: str) -> BuildPlan:
    """Resolve one target; writes the plan when ``config.output`` is set."""
    planner = load_workspace(config)
    plan = planner.plan(target, config.configuration)
    if config.output:
        write_plan(plan, config.output)
        logger.info("wrote plan for %s to %s", target, config.output)
    return plan


def resolve_many(config: ResolverConfig, targets: list[str]) -> dict[str, BuildPlan]:
    planner = load_workspace(config)
    return planner.plan_many(targets, config.configuration, max_workers=config.max_workers)
