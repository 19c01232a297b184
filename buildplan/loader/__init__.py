"""Load declarations into registries."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from buildplan.errors import DeclarationError
from buildplan.loader.schema import Declarations, ModuleDecl, SettingsDecl, TargetDecl
from buildplan.models import Module
from buildplan.registry import ModuleRegistry, TargetRegistry

logger = logging.getLogger(__name__)


def parse_declarations(data: object) -> Declarations:
    try:
        return Declarations.model_validate(data)
    except ValidationError as e:
        raise DeclarationError(f"Invalid declarations: {e}") from e


def load_declarations(path: Path) -> Declarations:
    """Read a JSON declarations file, or scan a directory of rules files."""
    if path.is_dir():
        from buildplan.scanner import scan_rules
        return scan_rules(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DeclarationError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DeclarationError(f"{path} is not valid JSON: {e}") from e
    return parse_declarations(data)


def populate(
    decls: Declarations,
    modules: ModuleRegistry,
    targets: TargetRegistry,
    external_modules: list[str] | None = None,
) -> None:
    """Register externals, then modules, then targets."""
    declared = {m.name for m in decls.modules}
    for name in dict.fromkeys([*decls.external_modules, *(external_modules or [])]):
        if name not in declared and name not in modules:
            modules.register(Module(name=name))
    for module_decl in decls.modules:
        modules.register(module_decl.to_module())
    for target_decl in decls.targets:
        targets.register(target_decl.to_target())
    logger.info("loaded %d modules and %d targets", len(modules), len(targets))


__all__ = [
    "Declarations",
    "ModuleDecl",
    "SettingsDecl",
    "TargetDecl",
    "load_declarations",
    "parse_declarations",
    "populate",
]
