"""Request-scoped logging context.

Fields pushed here (``request_id``, ``primary_need`` ...) are merged into every
log record emitted while the scope is active. Backed by contextvars so values
do not leak between threads or between concurrent requests.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("bridge_aid_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(_LOG_CONTEXT.get())


def push_log_context(**fields: Any) -> Token:
    """Merge ``fields`` into the current context and return a reset token."""
    return _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by ``token``."""
    _LOG_CONTEXT.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly for tests."""
    _LOG_CONTEXT.set({})


class log_context:
    """Context manager that scopes logging fields.

    Example:
        >>> with log_context(request_id="a1b2"):
        ...     logger.info("Matching started")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "log_context":
        self._token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self._token is not None:
            pop_log_context(self._token)
            self._token = None
        return False
