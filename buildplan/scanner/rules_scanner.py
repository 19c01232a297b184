"""Rules scanner: regex-based reading of ``*.Target.cs`` and ``*.Build.cs`` files."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import ValidationError

from buildplan.errors import DeclarationError
from buildplan.loader.schema import Declarations, ModuleDecl, SettingsDecl, TargetDecl
from buildplan.scanner.base import BaseScanner

TARGET_SUFFIX = ".Target.cs"
BUILD_SUFFIX = ".Build.cs"
SOURCE_SUFFIXES = (".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".inl")

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_STRING_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')

_TARGET_TYPE_RE = re.compile(r"\bType\s*=\s*TargetType\.(\w+)")
_CPP_STANDARD_RE = re.compile(r"\bCppStandard\s*=\s*CppStandardVersion\.(\w+)")
_PCH_USAGE_RE = re.compile(r"\bPCHUsage\s*=\s*(?:ModuleRules\.)?PCHUsageMode\.(\w+)")
_OPTIMIZE_RE = re.compile(r"\bOptimizeCode\s*=\s*(?:ModuleRules\.)?CodeOptimization\.(\w+)")

_DEPENDENCY_PROPS = ("PublicDependencyModuleNames", "PrivateDependencyModuleNames")
_INCLUDE_PROPS = ("PublicIncludePaths", "PrivateIncludePaths")
_DEFINITION_PROPS = ("PublicDefinitions", "PrivateDefinitions")
_LIBRARY_PROPS = ("PublicAdditionalLibraries", "PublicSystemLibraries")


def _strip_comments(text: str) -> str:
    return _LINE_COMMENT_RE.sub("", _BLOCK_COMMENT_RE.sub("", text))


def _collection_re(prop: str) -> re.Pattern[str]:
    return re.compile(
        rf"\b{prop}\.(?:AddRange\s*\(\s*new\s+[\w<>\[\]]+\s*(?:\(\s*\))?\s*\{{(?P<many>[^}}]*)\}}"
        rf"|Add\s*\(\s*(?P<one>\"(?:[^\"\\]|\\.)*\")\s*\))",
    )


def collect_strings(text: str, props: tuple[str, ...]) -> list[str]:
    """String literals added to any of ``props``, in source order, de-duplicated."""
    found: list[tuple[int, str]] = []
    for prop in props:
        for m in _collection_re(prop).finditer(text):
            body = m.group("many") if m.group("many") is not None else m.group("one")
            for s in _STRING_RE.finditer(body):
                found.append((m.start() + s.start(), s.group(1)))
    found.sort()
    return list(dict.fromkeys(value for _, value in found))


def _cpp_standard(value: str) -> str:
    m = re.fullmatch(r"Cpp(\d+)", value)
    return f"c++{m.group(1)}" if m else value.lower()


class RulesScanner(BaseScanner):
    suffixes = (TARGET_SUFFIX, BUILD_SUFFIX)

    def scan_file(self, file_path: Path, root: Path, decls: Declarations) -> None:
        text = _strip_comments(file_path.read_text(encoding="utf-8"))
        try:
            if file_path.name.endswith(TARGET_SUFFIX):
                decls.targets.append(self._scan_target(file_path, text))
            else:
                decls.modules.append(self._scan_module(file_path, root, text))
        except ValidationError as e:
            raise DeclarationError(f"Invalid rules file {file_path}: {e}") from e

    def _scan_target(self, file_path: Path, text: str) -> TargetDecl:
        name = file_path.name[: -len(TARGET_SUFFIX)]
        m = _TARGET_TYPE_RE.search(text)
        return TargetDecl(
            name=name,
            build_type=m.group(1) if m else "game",
            modules=collect_strings(text, ("ExtraModuleNames",)),
        )

    def _scan_module(self, file_path: Path, root: Path, text: str) -> ModuleDecl:
        name = file_path.name[: -len(BUILD_SUFFIX)]
        module_dir = file_path.parent

        scalars: dict[str, str] = {}
        m = _CPP_STANDARD_RE.search(text)
        if m:
            scalars["cpp_standard"] = _cpp_standard(m.group(1))
        m = _PCH_USAGE_RE.search(text)
        if m:
            scalars["pch_usage"] = m.group(1)
        m = _OPTIMIZE_RE.search(text)
        if m:
            scalars["optimization"] = m.group(1)

        settings = SettingsDecl(
            include_paths=collect_strings(text, _INCLUDE_PROPS),
            definitions=collect_strings(text, _DEFINITION_PROPS),
            link_libraries=collect_strings(text, _LIBRARY_PROPS),
            **scalars,
        )
        return ModuleDecl(
            name=name,
            path=module_dir.relative_to(root).as_posix(),
            sources=self._module_sources(module_dir),
            dependencies=collect_strings(text, _DEPENDENCY_PROPS),
            settings=settings,
        )

    def _module_sources(self, module_dir: Path) -> list[str]:
        # Nested modules own their own sources
        nested = {
            p.parent for p in module_dir.rglob(f"*{BUILD_SUFFIX}") if p.parent != module_dir
        }
        sources: list[str] = []
        for path in sorted(module_dir.rglob("*")):
            if path.suffix not in SOURCE_SUFFIXES or path.is_dir():
                continue
            rel = path.relative_to(module_dir)
            if self._should_skip(rel) or any(d in path.parents for d in nested):
                continue
            sources.append(rel.as_posix())
        return sources
