"""Rules-file scanners."""

from __future__ import annotations

from pathlib import Path

from buildplan.loader.schema import Declarations
from buildplan.scanner.base import BaseScanner
from buildplan.scanner.rules_scanner import RulesScanner, collect_strings


def scan_rules(directory: Path, skip_dirs: list[str] | None = None) -> Declarations:
    """Scan a source tree for target and module rules files."""
    return RulesScanner(skip_dirs=skip_dirs).scan_directory(directory)


__all__ = [
    "BaseScanner",
    "RulesScanner",
    "collect_strings",
    "scan_rules",
]
