"""Web API for buildplan (optional ``web`` extra)."""

from buildplan.web.app import create_app

__all__ = ["create_app"]
