"""
HTTP surface for KilluStats.

- ``GET /api/stats/{identifier}``: statistics snapshot of one player
- ``GET /health``: primary store reachability
"""

from src.api.app import create_app

__all__ = ["create_app"]
