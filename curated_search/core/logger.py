"""Structured logging: console output plus an optional JSON-lines file."""

import json
import logging
import os
import sys
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from curated_search.core.config import config


def format_duration_ms(ms: float) -> str:
    if ms <= 0:
        return "0ms"
    if ms >= 60_000:
        m = int(ms // 60_000)
        s = (ms % 60_000) / 1000
        return f"{m}m" if s < 0.05 else f"{m}m {s:.0f}s"
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms:.0f}ms"


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except Exception:
        return False


def color(role: str) -> str:
    if not _use_color():
        return ""
    # 38;5;N = foreground 256-color
    codes = {
        "dim": "\033[38;5;239m",
        "source": "\033[38;5;81m",
        "ok": "\033[38;5;78m",
        "fail": "\033[38;5;203m",
        "duration": "\033[38;5;221m",
        "query": "\033[38;5;246m",
    }
    return codes.get(role, "")


def reset() -> str:
    if not _use_color():
        return ""
    return "\033[0m"


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class RouterLogger:
    """Thin wrapper over the ``curated_search`` stdlib logger.

    Console output always goes through ``logging``. When ``LOG_FILE`` is
    configured, warnings are also appended as JSON lines.
    """

    def __init__(self):
        self._file_lock = threading.Lock()
        self._log_file_handle = None
        if config.log_file is not None:
            config.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._log_file_handle = open(config.log_file, "a", encoding="utf-8")
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("curated_search")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(getattr(logging, config.log_level, logging.INFO))
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)

    def log_event(self, event: LogEvent) -> None:
        if self._log_file_handle is None:
            return
        with self._file_lock:
            self._log_file_handle.write(event.to_json() + "\n")
            self._log_file_handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    @staticmethod
    def _log_kwargs(kwargs: dict[str, Any]) -> dict[str, Any]:
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        return {k: v for k, v in kwargs.items() if k in allowed}

    def info(self, message: str, *args, **kwargs):
        self.console.info(message, *args, **self._log_kwargs(kwargs))

    def warning(self, message: str, *args, **kwargs):
        self.log_event(
            LogEvent(
                event_type="WARNING",
                timestamp=self._timestamp(),
                data={"message": message[:500]},
            )
        )
        self.console.warning(f"⚠️ {message}", *args, **self._log_kwargs(kwargs))

    def debug(self, message: str, *args, **kwargs):
        self.console.debug(message, *args, **self._log_kwargs(kwargs))


logger = RouterLogger()
