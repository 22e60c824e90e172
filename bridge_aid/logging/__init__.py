"""Structured logging helpers shared by every Bridge Aid component."""

import logging
from typing import Optional, Union

from .context import get_log_context, log_context

__all__ = ["ComponentLoggerAdapter", "get_logger", "get_log_context", "log_context"]


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with a component name.

    Fields passed through ``extra`` on the individual call win over the
    adapter's defaults, so a call can still override ``component``.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Return a module logger, optionally bound to a component label.

    Args:
        name: Logger name (normally ``__name__``)
        component: Label injected as the ``component`` field of every record

    Example:
        >>> logger = get_logger(__name__, component="catalog")
        >>> logger.info("Catalog loaded", extra={"event": "catalog.load.completed"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger
