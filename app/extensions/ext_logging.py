from contextvars import ContextVar, Token
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional
import uuid

from configs import app_config

trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def trace_id_generator() -> str:
    return str(uuid.uuid4().hex)


def bind_trace_id(trace_id: Optional[str] = None) -> Token[Optional[str]]:
    """Set the trace id for the current context, generating one when omitted."""
    return trace_id_var.set(trace_id or trace_id_generator())


def init_logging():
    log_handlers: list[logging.Handler] = []
    log_file = app_config.LOG_FILE
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                filename=log_file,
                maxBytes=app_config.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=app_config.LOG_FILE_BACKUP_COUNT,
            )
        )

    # Always add StreamHandler to log to console
    sh = logging.StreamHandler(sys.stdout)
    log_handlers.append(sh)

    for handler in log_handlers:
        handler.addFilter(TraceIdFilter())

    logging.basicConfig(
        level=app_config.LOG_LEVEL,
        format=app_config.LOG_FORMAT,
        datefmt=app_config.LOG_DATEFORMAT,
        handlers=log_handlers,
        force=True,
    )

    apply_trace_id_formatter()

    # httpx logs every request at INFO, the client already does
    logging.getLogger("httpx").setLevel(logging.WARNING)
    log_tz = app_config.LOG_TZ
    if log_tz:
        from datetime import datetime

        import pytz

        timezone = pytz.timezone(log_tz)

        def time_converter(seconds):
            return datetime.fromtimestamp(seconds, tz=timezone).timetuple()

        for handler in logging.root.handlers:
            if handler.formatter:
                handler.formatter.converter = time_converter


class TraceIdFilter(logging.Filter):
    # Makes the trace id of the current task available to the log format.
    # Records emitted outside a traced context get None.
    def filter(self, record):
        trace_id = trace_id_var.get()
        record.trace_id = trace_id
        return True


class TraceIdFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, "trace_id"):
            record.trace_id = ""
        return super().format(record)


def apply_trace_id_formatter():
    for handler in logging.root.handlers:
        if handler.formatter:
            handler.formatter = TraceIdFormatter(app_config.LOG_FORMAT, app_config.LOG_DATEFORMAT)
