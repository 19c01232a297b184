"""Error kinds raised by registration and resolution.

Every error is terminal for the operation that raised it. ``exit_code`` is the
process status the CLI reports for that kind.
"""

from __future__ import annotations


class BuildPlanError(Exception):
    exit_code = 1


class DeclarationError(BuildPlanError):
    """Declarations file could not be read or failed validation."""
    exit_code = 1


class UnknownModuleError(BuildPlanError):
    exit_code = 2

    def __init__(self, name: str, referenced_by: str | None = None):
        self.name = name
        self.referenced_by = referenced_by
        msg = f"Unknown module {name!r}"
        if referenced_by:
            msg += f" (referenced by {referenced_by!r})"
        super().__init__(msg)


class UnknownTargetError(BuildPlanError):
    exit_code = 2

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown target {name!r}")


class CyclicDependencyError(BuildPlanError):
    exit_code = 3

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        path = " -> ".join(self.cycle + self.cycle[:1])
        super().__init__(f"Dependency cycle: {path}")


class SettingConflictError(BuildPlanError):
    exit_code = 4

    def __init__(self, module: str, key: str, value: str | None, other_value: str | None,
                 source: str, other_source: str):
        self.module = module
        self.key = key
        self.value = value
        self.other_value = other_value
        self.source = source
        self.other_source = other_source
        super().__init__(
            f"Conflicting values for {key!r} while merging {module!r}: "
            f"{value!r} from {source!r} vs {other_value!r} from {other_source!r}"
        )


class DuplicateModuleError(BuildPlanError):
    exit_code = 5

    def __init__(self, name: str, target: str | None = None):
        self.name = name
        self.target = target
        if target:
            super().__init__(f"Module {name!r} listed more than once in target {target!r}")
        else:
            super().__init__(f"Module {name!r} is already registered")


class DuplicateTargetError(BuildPlanError):
    exit_code = 6

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Target {name!r} is already registered")


class RegistrationClosedError(BuildPlanError):
    exit_code = 7

    def __init__(self, registry: str, name: str):
        self.registry = registry
        self.name = name
        super().__init__(f"Cannot register {name!r}: {registry} is frozen for resolution")
