"""Infrastructure modules for the ipwatch application.

Centralized infrastructure components:
- configuration: Settings management (settings, IpWatchSettings, UpstreamSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- operations: Operation results and error classification
- clients: HTTP fetch facade
- events: In-process signals with cancellable subscriptions
- scheduling: One-shot timers on the event loop
- services: Application-scoped providers (get_settings, get_http_client)
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Services
from infrastructure.services import get_http_client, get_settings

__all__ = [
    # Configuration
    "settings",
    # Logging
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
    # Services
    "get_http_client",
    "get_settings",
]
