"""HTTP surface for the observer process."""

from __future__ import annotations

from .app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
