"""Opt-in error logging around client calls.

Nothing here is installed globally. Wrap a single function with
``log_errors`` or a whole client with ``ErrorLoggingClient``::

    client = ErrorLoggingClient(ReplicateClient(token))
    client.run("owner/model", {"input": {...}})

Every exception is logged and re-raised unchanged.
"""

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def log_errors(func: F, log: Optional[logging.Logger] = None) -> F:
    """Wrap a callable so exceptions it raises are logged before propagating.

    Args:
        func: Callable to wrap
        log: Logger to use (default: this module's logger)

    Returns:
        Wrapped callable with the same signature
    """
    log = log or logger

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            log.error(
                "%s failed: %s: %s",
                getattr(func, "__qualname__", repr(func)),
                type(e).__name__,
                e,
                exc_info=e,
            )
            raise

    return wrapper  # type: ignore[return-value]


class ErrorLoggingClient:
    """Proxy that applies ``log_errors`` to every public method of a client."""

    def __init__(self, client: Any, log: Optional[logging.Logger] = None):
        self._client = client
        self._log = log or logger

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._client, name)
        if name.startswith("_") or not callable(attr):
            return attr
        return log_errors(attr, self._log)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._client!r})"
