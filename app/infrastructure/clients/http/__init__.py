"""HTTP fetch facade.

Public API:
- HttpClient: blocking GET/POST with timeout returning OperationResult
"""

from infrastructure.clients.http.client import HttpClient

__all__ = ["HttpClient"]
