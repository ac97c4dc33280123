"""Context binding for structured logging.

Binds values to structlog's context variables for the duration of a block so
every log entry emitted inside (including from collaborators) carries them.

Usage:
    from infrastructure.logging import bind_log_context

    with bind_log_context(generation=7, trigger="network"):
        logger.info("refresh_started")

Dependencies:
    - structlog.contextvars
"""

from contextlib import contextmanager
from typing import Any, Generator

import structlog


@contextmanager
def bind_log_context(**context: Any) -> Generator[None, None, None]:
    """Bind context to all logs within the context manager.

    None values are skipped. The bound keys are removed when the block
    exits, even on error.

    Args:
        **context: Key-value pairs to include in logs.
    """
    values = {key: value for key, value in context.items() if value is not None}
    structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*values.keys())


def clear_log_context() -> None:
    """Clear all bound context from the logging context."""
    structlog.contextvars.clear_contextvars()
