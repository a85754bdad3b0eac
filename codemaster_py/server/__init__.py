"""Progress store relay server."""

from .app import create_app, sanitize_record

__all__ = ["create_app", "sanitize_record"]
