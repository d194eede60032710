"""Cityscope: a server-rendered neighborhood social feed."""

__all__ = ["__version__"]

__version__ = "0.1.0"
