"""Module and target registries."""

from __future__ import annotations

from buildplan.registry.base import PhasedRegistry
from buildplan.registry.modules import ModuleRegistry
from buildplan.registry.targets import TargetRegistry, validate_target

__all__ = [
    "PhasedRegistry",
    "ModuleRegistry",
    "TargetRegistry",
    "validate_target",
]
