"""Logging configuration for the application.

Every record carries the trace id of the request being handled (or "-"
outside a request) so log lines can be correlated with X-Trace-ID.
"""

import logging
import sys

from accounts.core.config import Settings, get_settings
from accounts.shared.context import get_current_trace_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] - %(message)s"


class TraceContextFilter(logging.Filter):
    """Attach the current request's trace id to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_current_trace_id() or "-"
        return True


def setup_logging(settings: Settings | None = None) -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise settings.log_level.
    Output goes to stdout. Like logging.basicConfig, does nothing when the
    root logger already has handlers (e.g. under pytest or a second call).
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else settings.log_level.upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=log_level, handlers=[handler])
