"""FastAPI transport for the user and task services."""

from .app import create_app

__all__ = ["create_app"]
