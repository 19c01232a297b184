"""Abstract base scanner for rules files."""

from __future__ import annotations

import abc
import fnmatch
import logging
from pathlib import Path

from buildplan.loader.schema import Declarations

logger = logging.getLogger(__name__)


class BaseScanner(abc.ABC):
    """Base class for rules-file scanners."""

    suffixes: tuple[str, ...]

    def __init__(self, skip_dirs: list[str] | None = None):
        self.skip_dirs = skip_dirs or [
            ".git", "__pycache__", "Binaries", "Intermediate", "Saved",
            "DerivedDataCache", "build", "dist", ".vs",
        ]

    @abc.abstractmethod
    def scan_file(self, file_path: Path, root: Path, decls: Declarations) -> None:
        """Scan a single rules file and add its declarations to ``decls``."""

    def scan_directory(self, directory: Path, decls: Declarations | None = None) -> Declarations:
        """Recursively scan a directory for rules files."""
        decls = decls if decls is not None else Declarations()
        for path in sorted(directory.rglob("*")):
            if path.is_dir() or self._should_skip(path.relative_to(directory)):
                continue
            if path.name.endswith(self.suffixes):
                try:
                    self.scan_file(path, directory, decls)
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning("Skipping unreadable rules file %s: %s", path, e)
        return decls

    def _should_skip(self, path: Path) -> bool:
        for part in path.parts:
            for pattern in self.skip_dirs:
                if fnmatch.fnmatch(part, pattern):
                    return True
        return False
