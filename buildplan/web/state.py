"""In-memory state for the web API: loaded workspaces keyed by id."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from buildplan.analysis import Planner


@dataclass
class Workspace:
    planner: Planner
    source: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """Workspaces shared by all API routes; each one is frozen once loaded."""

    def __init__(self):
        self.workspaces: dict[str, Workspace] = {}

    def add(self, workspace: Workspace) -> Workspace:
        self.workspaces[workspace.id] = workspace
        return workspace

    def get(self, workspace_id: str) -> Workspace | None:
        return self.workspaces.get(workspace_id)

    def clear(self) -> None:
        self.workspaces.clear()


state = AppState()
