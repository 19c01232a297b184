"""Serialize a BuildPlan for the toolchain invoker."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from buildplan.models import BuildPlan, MergedSettings, format_definition


def settings_to_dict(settings: MergedSettings) -> dict[str, Any]:
    data: dict[str, Any] = {
        "include_paths": list(settings.include_paths),
        "definitions": [format_definition(n, v) for n, v in settings.definitions],
        "link_libraries": list(settings.link_libraries),
    }
    for key, value in settings.scalars:
        data[key.value] = value
    return data


def plan_to_dict(plan: BuildPlan) -> dict[str, Any]:
    return {
        "target": plan.target,
        "build_type": plan.build_type.value,
        "configuration": plan.configuration.value,
        "modules": [
            {
                "name": entry.name,
                "sources": list(entry.sources),
                "settings": settings_to_dict(entry.settings),
            }
            for entry in plan.entries
        ],
    }


def emit(plan: BuildPlan) -> str:
    """Deterministic JSON text; identical plans give identical bytes."""
    return json.dumps(plan_to_dict(plan), indent=2, ensure_ascii=False) + "\n"


def write_plan(plan: BuildPlan, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(emit(plan), encoding="utf-8")
    return path
