"""Pydantic schema for declarations files."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buildplan.models import (
    BuildSettings,
    BuildType,
    Configuration,
    Module,
    SettingKey,
    Target,
    parse_definition,
)


def _lower(value):
    return value.lower() if isinstance(value, str) else value


class SettingsDecl(BaseModel):
    model_config = ConfigDict(extra="forbid")

    include_paths: list[str] = Field(default_factory=list)
    link_libraries: list[str] = Field(default_factory=list)
    definitions: Union[list[str], dict[str, Union[str, None]]] = Field(default_factory=list)
    cpp_standard: str | None = None
    optimization: str | None = None
    pch_usage: str | None = None
    warning_level: str | None = None

    @field_validator("definitions")
    @classmethod
    def _unique_definitions(cls, value):
        if isinstance(value, dict):
            return value
        seen: set[str] = set()
        for text in value:
            name, _ = parse_definition(text)
            if name in seen:
                raise ValueError(f"definition {name!r} declared more than once")
            seen.add(name)
        return value

    def to_settings(self) -> BuildSettings:
        if isinstance(self.definitions, dict):
            definitions = tuple(self.definitions.items())
        else:
            definitions = tuple(parse_definition(d) for d in self.definitions)
        scalars = tuple(
            (key, getattr(self, key.value))
            for key in (SettingKey.CPP_STANDARD, SettingKey.OPTIMIZATION,
                        SettingKey.PCH_USAGE, SettingKey.WARNING_LEVEL)
            if getattr(self, key.value) is not None
        )
        return BuildSettings(
            include_paths=tuple(dict.fromkeys(self.include_paths)),
            link_libraries=tuple(dict.fromkeys(self.link_libraries)),
            definitions=definitions,
            scalars=scalars,
        )


class ModuleDecl(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    path: str = ""
    sources: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    settings: SettingsDecl = Field(default_factory=SettingsDecl)
    overrides: list[str] = Field(default_factory=list)
    configurations: dict[Configuration, SettingsDecl] = Field(default_factory=dict)
    build_types: dict[BuildType, SettingsDecl] = Field(default_factory=dict)

    @field_validator("configurations", "build_types", mode="before")
    @classmethod
    def _lower_keys(cls, value):
        if isinstance(value, dict):
            return {_lower(k): v for k, v in value.items()}
        return value

    def resolved_sources(self) -> tuple[str, ...]:
        root = PurePosixPath(self.path) if self.path else None
        sources = [str(root / s) if root else str(PurePosixPath(s)) for s in self.sources]
        return tuple(dict.fromkeys(sources))

    def to_module(self) -> Module:
        return Module(
            name=self.name,
            sources=self.resolved_sources(),
            dependencies=tuple(dict.fromkeys(self.dependencies)),
            settings=self.settings.to_settings(),
            overrides=frozenset(self.overrides),
            configuration_settings={c: s.to_settings() for c, s in self.configurations.items()},
            build_type_settings={b: s.to_settings() for b, s in self.build_types.items()},
        )


class TargetDecl(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1)
    build_type: BuildType = Field(default=BuildType.GAME, alias="type")
    modules: list[str] = Field(default_factory=list)

    @field_validator("build_type", mode="before")
    @classmethod
    def _lower_type(cls, value):
        return _lower(value)

    def to_target(self) -> Target:
        return Target(name=self.name, build_type=self.build_type, modules=tuple(self.modules))


class Declarations(BaseModel):
    model_config = ConfigDict(extra="forbid")

    modules: list[ModuleDecl] = Field(default_factory=list)
    targets: list[TargetDecl] = Field(default_factory=list)
    external_modules: list[str] = Field(default_factory=list)
