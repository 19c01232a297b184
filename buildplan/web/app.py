"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from buildplan import __version__
from buildplan.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="buildplan", version=__version__)
    app.include_router(router)
    return app
