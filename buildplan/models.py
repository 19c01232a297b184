"""Data models for the buildplan resolver."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class BuildType(enum.Enum):
    GAME = "game"
    EDITOR = "editor"
    SERVER = "server"
    CLIENT = "client"


class Configuration(enum.Enum):
    DEBUG = "debug"
    DEVELOPMENT = "development"
    SHIPPING = "shipping"


class SettingKind(enum.Enum):
    SCALAR = "scalar"
    LIST = "list"
    KEYED = "keyed"  # family of named scalars, e.g. preprocessor definitions


class SettingKey(enum.Enum):
    INCLUDE_PATHS = "include_paths"
    DEFINITIONS = "definitions"
    LINK_LIBRARIES = "link_libraries"
    CPP_STANDARD = "cpp_standard"
    OPTIMIZATION = "optimization"
    PCH_USAGE = "pch_usage"
    WARNING_LEVEL = "warning_level"

    @property
    def kind(self) -> SettingKind:
        return _SETTING_KINDS[self]


_SETTING_KINDS = {
    SettingKey.INCLUDE_PATHS: SettingKind.LIST,
    SettingKey.LINK_LIBRARIES: SettingKind.LIST,
    SettingKey.DEFINITIONS: SettingKind.KEYED,
    SettingKey.CPP_STANDARD: SettingKind.SCALAR,
    SettingKey.OPTIMIZATION: SettingKind.SCALAR,
    SettingKey.PCH_USAGE: SettingKind.SCALAR,
    SettingKey.WARNING_LEVEL: SettingKind.SCALAR,
}

LIST_KEYS = tuple(k for k in SettingKey if k.kind is SettingKind.LIST)
SCALAR_KEYS = tuple(k for k in SettingKey if k.kind is SettingKind.SCALAR)


def parse_definition(text: str) -> tuple[str, str | None]:
    """Split ``"NAME=VALUE"`` into ``("NAME", "VALUE")``; a bare name has no value."""
    name, sep, value = text.partition("=")
    name = name.strip()
    if not name:
        raise ValueError(f"Empty preprocessor definition: {text!r}")
    return name, (value.strip() if sep else None)


def format_definition(name: str, value: str | None) -> str:
    return name if value is None else f"{name}={value}"


@dataclass(frozen=True)
class BuildSettings:
    """Build settings declared by a single module (before inheritance)."""
    include_paths: tuple[str, ...] = ()
    link_libraries: tuple[str, ...] = ()
    definitions: tuple[tuple[str, str | None], ...] = ()
    scalars: tuple[tuple[SettingKey, str], ...] = ()

    def scalar(self, key: SettingKey) -> str | None:
        for k, v in self.scalars:
            if k is key:
                return v
        return None

    def list_values(self, key: SettingKey) -> tuple[str, ...]:
        if key is SettingKey.INCLUDE_PATHS:
            return self.include_paths
        if key is SettingKey.LINK_LIBRARIES:
            return self.link_libraries
        raise KeyError(key)

    def overlay(self, other: BuildSettings) -> BuildSettings:
        """Layer ``other`` on top: lists extend, definitions and scalars replace."""
        definitions = dict(self.definitions)
        definitions.update(other.definitions)
        scalars = dict(self.scalars)
        scalars.update(other.scalars)
        return BuildSettings(
            include_paths=_unique(self.include_paths + other.include_paths),
            link_libraries=_unique(self.link_libraries + other.link_libraries),
            definitions=tuple(definitions.items()),
            scalars=tuple(sorted(scalars.items(), key=lambda kv: kv[0].value)),
        )


@dataclass(frozen=True)
class Module:
    """A named compilation unit."""
    name: str
    sources: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    settings: BuildSettings = field(default_factory=BuildSettings)
    overrides: frozenset[str] = frozenset()  # scalar key values and definition names
    configuration_settings: dict[Configuration, BuildSettings] = field(default_factory=dict, compare=False)
    build_type_settings: dict[BuildType, BuildSettings] = field(default_factory=dict, compare=False)

    def is_override(self, setting: str) -> bool:
        return setting in self.overrides

    def effective_settings(self, configuration: Configuration, build_type: BuildType) -> BuildSettings:
        """Own settings with the build-type and configuration overlays applied."""
        settings = self.settings
        if build_type in self.build_type_settings:
            settings = settings.overlay(self.build_type_settings[build_type])
        if configuration in self.configuration_settings:
            settings = settings.overlay(self.configuration_settings[configuration])
        return settings


@dataclass(frozen=True)
class Target:
    """A top-level deliverable naming the modules linked into it."""
    name: str
    build_type: BuildType = BuildType.GAME
    modules: tuple[str, ...] = ()


@dataclass(frozen=True)
class MergedSettings:
    """Settings of a module after inheritance from its dependencies."""
    include_paths: tuple[str, ...] = ()
    link_libraries: tuple[str, ...] = ()
    definitions: tuple[tuple[str, str | None], ...] = ()
    scalars: tuple[tuple[SettingKey, str], ...] = ()

    def scalar(self, key: SettingKey) -> str | None:
        return dict(self.scalars).get(key)

    def definition(self, name: str) -> str | None:
        return dict(self.definitions).get(name)


@dataclass(frozen=True)
class PlanEntry:
    name: str
    sources: tuple[str, ...]
    settings: MergedSettings


@dataclass(frozen=True)
class BuildPlan:
    """Resolved, ordered module list for one (target, configuration) pair."""
    target: str
    build_type: BuildType
    configuration: Configuration
    entries: tuple[PlanEntry, ...] = ()

    @property
    def order(self) -> list[str]:
        return [e.name for e in self.entries]

    def entry(self, name: str) -> PlanEntry:
        for e in self.entries:
            if e.name == name:
                return e
        raise KeyError(name)


@dataclass
class ResolverConfig:
    """Configuration for a resolve run."""
    source: Path = field(default_factory=lambda: Path("buildplan.json"))
    configuration: Configuration = Configuration.DEVELOPMENT
    output: Path | None = None
    external_modules: list[str] = field(default_factory=list)
    defer_validation: bool = False
    max_workers: int = 4


def _unique(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))
