"""Logging setup: one stream handler, request id on every record."""

import logging
from contextvars import ContextVar

from portal.core.config import settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Copy the current request id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # Idempotent: reloads (uvicorn --reload, tests) must not stack handlers
    for handler in root.handlers:
        if getattr(handler, "_portal_handler", False):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._portal_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
