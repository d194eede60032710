"""HTTP clients for the Cityscope backend."""
from .http import ApiError, FilePart, FormPayload, HttpHook, RequestConfig

__all__ = ["ApiError", "FilePart", "FormPayload", "HttpHook", "RequestConfig"]
