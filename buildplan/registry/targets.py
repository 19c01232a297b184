"""Target registry."""

from __future__ import annotations

import logging

from buildplan.errors import DuplicateModuleError, DuplicateTargetError, UnknownTargetError
from buildplan.models import Target
from buildplan.registry.base import PhasedRegistry
from buildplan.registry.modules import ModuleRegistry

logger = logging.getLogger(__name__)


class TargetRegistry(PhasedRegistry[Target]):
    """Targets keyed by name, validated against a module registry.

    With ``defer_validation`` the module names are only checked when a
    target is resolved, so targets may be registered before their modules.
    """

    kind = "target registry"

    def __init__(self, modules: ModuleRegistry, defer_validation: bool = False):
        super().__init__()
        self.modules = modules
        self.defer_validation = defer_validation

    def register(self, target: Target) -> Target:
        self._check_open(target.name)
        if target.name in self._items:
            raise DuplicateTargetError(target.name)
        validate_target(target, self.modules, check_modules=not self.defer_validation)
        self._items[target.name] = target
        logger.debug("registered target %s (%s, %d modules)",
                     target.name, target.build_type.value, len(target.modules))
        return target

    def lookup(self, name: str) -> Target:
        try:
            return self._items[name]
        except KeyError:
            raise UnknownTargetError(name) from None

    def freeze(self) -> None:
        self.modules.freeze()
        super().freeze()


def validate_target(target: Target, modules: ModuleRegistry, check_modules: bool = True) -> None:
    seen: set[str] = set()
    for name in target.modules:
        if name in seen:
            raise DuplicateModuleError(name, target=target.name)
        seen.add(name)
        if check_modules:
            modules.lookup(name, referenced_by=target.name)
