"""Logging setup for the CLI and the relay server."""

import logging
import os

from pythonjsonlogger import jsonlogger
from rich.logging import RichHandler


class ContextDefaultsFilter(logging.Filter):
    """Ensure structured logs always carry the service name and domain keys."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        for key in ("username", "problem_id", "submission_id"):
            if not hasattr(record, key):
                setattr(record, key, None)
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


def setup_logging(debug: bool = False, json_logs: bool = False) -> None:
    """
    Configure the root logger.
    The CLI logs through rich to stderr; the server emits JSON lines.
    """
    default_level = "INFO" if json_logs else "WARNING"
    level = "DEBUG" if debug else os.getenv("LOG_LEVEL", default_level).upper()

    root = logging.getLogger()
    root.setLevel(level)

    if json_logs:
        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s "
            "service=%(service)s username=%(username)s "
            "problem_id=%(problem_id)s submission_id=%(submission_id)s",
            rename_fields={"levelname": "level", "asctime": "time"},
        )
        handler.setFormatter(formatter)
        handler.addFilter(ContextDefaultsFilter(os.getenv("SERVICE_NAME", "codemaster-store")))
    else:
        handler = RichHandler(show_path=debug, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root.handlers.clear()
    root.addHandler(handler)
    logging.captureWarnings(True)

    # Route server libraries into the same handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
