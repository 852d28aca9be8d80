"""HTTP interface for the meeting pipeline."""

from .app import create_app

__all__ = ["create_app"]
