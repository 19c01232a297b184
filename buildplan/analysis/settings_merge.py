"""Settings merge: inherit build settings from dependencies with override precedence."""

from __future__ import annotations

from dataclasses import dataclass, field

from buildplan.errors import SettingConflictError
from buildplan.models import LIST_KEYS, SCALAR_KEYS, BuildSettings, MergedSettings, Module, SettingKey


@dataclass(frozen=True)
class ScalarValue:
    value: str | None
    source: str  # module that set it
    override: bool = False


@dataclass
class MergeState:
    """Merged settings of one module, with provenance for each scalar."""
    lists: dict[SettingKey, list[str]] = field(default_factory=lambda: {k: [] for k in LIST_KEYS})
    scalars: dict[SettingKey, ScalarValue] = field(default_factory=dict)
    definitions: dict[str, ScalarValue] = field(default_factory=dict)

    def freeze(self) -> MergedSettings:
        return MergedSettings(
            include_paths=tuple(self.lists[SettingKey.INCLUDE_PATHS]),
            link_libraries=tuple(self.lists[SettingKey.LINK_LIBRARIES]),
            definitions=tuple((name, sv.value) for name, sv in self.definitions.items()),
            scalars=tuple(
                (key, self.scalars[key].value)
                for key in sorted(self.scalars, key=lambda k: k.value)
            ),
        )


def combine(module: str, key: str, current: ScalarValue | None, incoming: ScalarValue) -> ScalarValue:
    """Settle two values of the same scalar setting.

    Equal values never conflict. An override beats a plain value; two plain
    values, or two overrides, that differ are a conflict.
    """
    if current is None:
        return incoming
    if current.value == incoming.value:
        return incoming if incoming.override and not current.override else current
    if incoming.override != current.override:
        return incoming if incoming.override else current
    raise SettingConflictError(
        module, key, current.value, incoming.value, current.source, incoming.source,
    )


def settle(
    module: str,
    key: str,
    candidates: list[ScalarValue],
    own: ScalarValue | None,
) -> ScalarValue | None:
    """Pick the merged value of one setting from dependency values and the module's own.

    An own override wins outright, so disagreeing dependencies are never
    compared. Otherwise the dependency values are combined first and the own
    value is combined on top of them.
    """
    if own is not None and own.override:
        return own
    inherited: ScalarValue | None = None
    for sv in candidates:
        inherited = combine(module, key, inherited, sv)
    if own is None:
        return inherited
    return combine(module, key, inherited, own)


def merge_settings(
    module: Module,
    own: BuildSettings,
    inherited: list[MergeState],
) -> MergeState:
    """Merge ``module``'s own settings over the merged settings of its dependencies.

    ``inherited`` must be in plan order; list values keep first-seen order.
    """
    state = MergeState()
    scalar_candidates: dict[SettingKey, list[ScalarValue]] = {}
    definition_candidates: dict[str, list[ScalarValue]] = {}

    for dep_state in inherited:
        for key in LIST_KEYS:
            _extend_unique(state.lists[key], dep_state.lists[key])
        for key, sv in dep_state.scalars.items():
            scalar_candidates.setdefault(key, []).append(sv)
        for name, sv in dep_state.definitions.items():
            definition_candidates.setdefault(name, []).append(sv)

    for key in LIST_KEYS:
        _extend_unique(state.lists[key], own.list_values(key))

    for key in SCALAR_KEYS:
        value = own.scalar(key)
        own_sv = None if value is None else ScalarValue(value, module.name, module.is_override(key.value))
        merged = settle(module.name, key.value, scalar_candidates.get(key, []), own_sv)
        if merged is not None:
            state.scalars[key] = merged

    own_definitions = dict(own.definitions)
    for name in [*definition_candidates, *(n for n in own_definitions if n not in definition_candidates)]:
        own_sv = None
        if name in own_definitions:
            own_sv = ScalarValue(own_definitions[name], module.name, module.is_override(name))
        state.definitions[name] = settle(
            module.name, f"definitions:{name}", definition_candidates.get(name, []), own_sv,
        )

    return state


def _extend_unique(target: list[str], values) -> None:
    for value in values:
        if value not in target:
            target.append(value)
