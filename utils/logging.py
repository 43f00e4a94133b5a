"""Logging setup and pipeline step tracing"""

import logging
import logging.config
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

QUIET_LOGGERS = ('requests', 'urllib3', 'httpx', 'openai', 'werkzeug', 'paho', 'socketio', 'engineio')

trace_logger = logging.getLogger('pipeline')


class ConsoleFormatter(logging.Formatter):
    """Tints whole console lines by level when writing to a terminal"""

    LEVEL_COLORS = {
        logging.DEBUG: 36,
        logging.WARNING: 33,
        logging.ERROR: 31,
        logging.CRITICAL: 35,
    }

    def __init__(self, fmt: str = LOG_FORMAT, datefmt: str = DATE_FORMAT, use_color: bool = True):
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def formatMessage(self, record):
        line = super().formatMessage(record)
        code = self.LEVEL_COLORS.get(record.levelno)
        if not self.use_color or code is None:
            return line
        return f"\033[{code}m{line}\033[0m"


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """Console logging on stdout, plus a plain file log when requested"""
    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'stream': sys.stdout,
            'formatter': 'console',
        },
    }
    if log_file:
        handlers['file'] = {
            'class': 'logging.FileHandler',
            'filename': log_file,
            'formatter': 'plain',
        }

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'console': {'()': ConsoleFormatter, 'use_color': sys.stdout.isatty()},
            'plain': {'format': LOG_FORMAT, 'datefmt': DATE_FORMAT},
        },
        'handlers': handlers,
        'root': {'level': level.upper(), 'handlers': list(handlers)},
        'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
    })


class StepTrace:
    """Outcome of one timed pipeline step; callers may set `detail`"""

    def __init__(self, request_id: str, step: str):
        self.request_id = request_id
        self.step = step
        self.detail = ''
        self.started = time.perf_counter()
        self.duration = None
        self.ok = None

    def finish(self, ok: bool):
        self.duration = time.perf_counter() - self.started
        self.ok = ok
        status = "✅" if ok else "❌"
        detail = f" ({self.detail})" if self.detail else ""
        trace_logger.info(f"{status} {self.request_id} | {self.step}{detail} in {self.duration:.3f}s")


@contextmanager
def traced_step(request_id: str, step: str) -> Iterator[StepTrace]:
    """Time a pipeline step and log whether it completed or raised"""
    trace = StepTrace(request_id, step)
    try:
        yield trace
    except BaseException:
        trace.finish(ok=False)
        raise
    trace.finish(ok=True)
