"""Logging setup: one stream handler with request IDs on every record."""

import logging

from gateway.middleware import request_id_var

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


class RequestIDFilter(logging.Filter):
    """Stamp each record with the request ID of the current request (or ``-``)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger. Safe to call more than once."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_gateway_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._gateway_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIDFilter())
    root.addHandler(handler)
    root.setLevel(level.upper())
