"""Page routers for the Cityscope UI."""
from __future__ import annotations

from . import auth, dashboard, images, profile

__all__ = ["auth", "dashboard", "images", "profile"]
