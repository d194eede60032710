"""Server-rendered UI for Cityscope."""
from .router import router

__all__ = ["router"]
