"""Plan serialization."""

from __future__ import annotations

from buildplan.exporter.plan_emitter import emit, plan_to_dict, settings_to_dict, write_plan

__all__ = ["emit", "plan_to_dict", "settings_to_dict", "write_plan"]
