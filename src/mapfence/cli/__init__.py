"""CLI module for mapfence.

Provides commands for listing stored regions, checking points and
rendering region overlays.
"""

from __future__ import annotations

from mapfence.cli.main import app

__all__ = ["app"]
