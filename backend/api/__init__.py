"""
SprintDesk API package.

Provides the FastAPI application for the SprintDesk issue tracker backend.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
