"""JSON logging with a per-request id"""

import logging

from flask import g, has_app_context
from pythonjsonlogger import jsonlogger


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            request_id = g.get("request_id") if has_app_context() else None
            record.request_id = request_id or "-"
        return True


def configure_logging(level: int = logging.INFO) -> None:
    """Send all records to stderr as JSON, the Lambda and Cloud Functions runtimes collect it."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(request_id)s %(message)s"
        )
    )
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)
