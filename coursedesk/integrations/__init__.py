"""
External integrations for coursedesk.

Modules:
- backend_client: Async HTTP client for the course backend
"""
from .backend_client import BackendClient, BackendError

__all__ = ["BackendClient", "BackendError"]
