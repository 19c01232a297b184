"""FastAPI routes for loading declarations and resolving plans."""

from __future__ import annotations

import asyncio
from pathlib import Path

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from buildplan.errors import (
    BuildPlanError,
    CyclicDependencyError,
    DeclarationError,
    SettingConflictError,
    UnknownModuleError,
    UnknownTargetError,
)
from buildplan.exporter import plan_to_dict
from buildplan.models import Configuration, ResolverConfig
from buildplan.pipeline import load_workspace
from buildplan.web.state import Workspace, state

router = APIRouter(prefix="/api")


# --- Request models ---

class LoadRequest(BaseModel):
    path: str
    external_modules: list[str] = Field(default_factory=list)


class PlanRequest(BaseModel):
    workspace_id: str
    target: str
    configuration: Configuration = Configuration.DEVELOPMENT


class PlansRequest(BaseModel):
    workspace_id: str
    targets: list[str]
    configuration: Configuration = Configuration.DEVELOPMENT


# --- Helpers ---

def _http_error(error: BuildPlanError) -> HTTPException:
    if isinstance(error, (UnknownModuleError, UnknownTargetError)):
        return HTTPException(404, str(error))
    if isinstance(error, DeclarationError):
        return HTTPException(400, str(error))
    if isinstance(error, (CyclicDependencyError, SettingConflictError)):
        detail = {"error": type(error).__name__, "message": str(error)}
        if isinstance(error, CyclicDependencyError):
            detail["cycle"] = error.cycle
        return HTTPException(409, detail)
    return HTTPException(409, str(error))


def _get_workspace(workspace_id: str) -> Workspace:
    workspace = state.get(workspace_id)
    if not workspace:
        raise HTTPException(404, f"Workspace not found: {workspace_id}")
    return workspace


def _summary(workspace: Workspace) -> dict:
    planner = workspace.planner
    return {
        "workspace_id": workspace.id,
        "source": workspace.source,
        "loaded_at": workspace.timestamp,
        "targets": [
            {"name": t.name, "build_type": t.build_type.value, "modules": list(t.modules)}
            for t in planner.targets
        ],
        "modules": planner.modules.names(),
    }


# --- Endpoints ---

@router.post("/load")
async def load(req: LoadRequest):
    path = Path(req.path).expanduser().resolve()
    if not path.exists():
        raise HTTPException(404, f"Path not found: {path}")
    config = ResolverConfig(source=path, external_modules=req.external_modules)
    try:
        planner = await asyncio.to_thread(load_workspace, config)
    except BuildPlanError as e:
        raise _http_error(e)
    workspace = state.add(Workspace(planner=planner, source=str(path)))
    return _summary(workspace)


@router.get("/workspaces/{workspace_id}/targets")
async def list_targets(workspace_id: str):
    return _summary(_get_workspace(workspace_id))["targets"]


@router.post("/plan")
async def plan(req: PlanRequest):
    planner = _get_workspace(req.workspace_id).planner
    try:
        result = await asyncio.to_thread(planner.plan, req.target, req.configuration)
    except BuildPlanError as e:
        raise _http_error(e)
    return plan_to_dict(result)


@router.post("/plans")
async def plans(req: PlansRequest):
    planner = _get_workspace(req.workspace_id).planner
    try:
        results = await asyncio.to_thread(planner.plan_many, req.targets, req.configuration)
    except BuildPlanError as e:
        raise _http_error(e)
    return {name: plan_to_dict(p) for name, p in results.items()}
