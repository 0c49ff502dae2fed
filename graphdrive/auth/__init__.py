"""OAuth helpers."""

from .oauth import GraphAuth

__all__ = ["GraphAuth"]
