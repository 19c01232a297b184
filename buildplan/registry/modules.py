"""Module registry."""

from __future__ import annotations

import logging

from buildplan.errors import CyclicDependencyError, DuplicateModuleError, UnknownModuleError
from buildplan.models import Module
from buildplan.registry.base import PhasedRegistry

logger = logging.getLogger(__name__)


class ModuleRegistry(PhasedRegistry[Module]):
    kind = "module registry"

    def register(self, module: Module) -> Module:
        self._check_open(module.name)
        if module.name in self._items:
            raise DuplicateModuleError(module.name)
        if module.name in module.dependencies:
            raise CyclicDependencyError([module.name])
        self._items[module.name] = module
        logger.debug("registered module %s (%d deps)", module.name, len(module.dependencies))
        return module

    def lookup(self, name: str, referenced_by: str | None = None) -> Module:
        try:
            return self._items[name]
        except KeyError:
            raise UnknownModuleError(name, referenced_by) from None
