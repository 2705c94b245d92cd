"""Client for the external image editing service."""

from .edit_client import EditService, EditServiceRequestError, GeminiEditClient, build_edit_request

__all__ = ["EditService", "EditServiceRequestError", "GeminiEditClient", "build_edit_request"]
