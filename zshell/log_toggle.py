"""
Runtime switch for where diagnostic logging goes.

`OutputSinkToggle` is a two-state machine (terminal ↔ file) bound to a key
press in the CLI. Normal command output is untouched; only the handler it
owns on the target logger is swapped.

The critical section is the read-flip-write of the state plus the handler
swap, because prompt_toolkit may run the key callback outside the main loop.
"""

from __future__ import annotations

import enum
import logging
import sys
import threading
from typing import Optional, TextIO

from .constants import LOG_FILE, LOG_FORMAT

logger = logging.getLogger(__name__)


class LogSink(enum.Enum):
    TERMINAL = "terminal"
    FILE = "file"

    @property
    def opposite(self) -> "LogSink":
        return LogSink.FILE if self is LogSink.TERMINAL else LogSink.TERMINAL


class OutputSinkToggle:
    """
    Owns one logging handler on ``target`` and moves it between the terminal
    stream and ``log_file``.
    """

    def __init__(
        self,
        *,
        log_file: str = LOG_FILE,
        target: Optional[logging.Logger] = None,
        stream: Optional[TextIO] = None,
        level: int = logging.NOTSET,
        formatter: Optional[logging.Formatter] = None,
    ) -> None:
        self.log_file = log_file
        self.target = target if target is not None else logging.getLogger()
        self.stream = stream
        self.level = level
        self.formatter = formatter or logging.Formatter(LOG_FORMAT)
        self._lock = threading.Lock()
        self._sink = LogSink.TERMINAL
        self._handler: Optional[logging.Handler] = None

    @property
    def sink(self) -> LogSink:
        with self._lock:
            return self._sink

    @property
    def handler(self) -> Optional[logging.Handler]:
        return self._handler

    def install(self) -> None:
        """Attach the initial terminal handler."""
        with self._lock:
            self._swap_handler(self._sink)

    def toggle(self) -> LogSink:
        """Flip the sink, announce the new state and return it."""
        with self._lock:
            entering = self._sink.opposite
            if entering is LogSink.TERMINAL:
                print("Stdout Logging: \033[92mON\033[0m")
            else:
                print("Stdout Logging: \033[91mOFF\033[0m")
            self._swap_handler(entering)
            self._sink = entering
            return entering

    def close(self) -> None:
        with self._lock:
            self._drop_handler()

    # ------------------------------------------------------------------
    #  Handler plumbing – callers hold self._lock
    # ------------------------------------------------------------------
    def _build_handler(self, sink: LogSink) -> logging.Handler:
        if sink is LogSink.FILE:
            handler: logging.Handler = logging.FileHandler(self.log_file, mode="a", encoding="utf-8")
        else:
            # Resolve sys.stderr lazily so test capture and redirection still apply.
            handler = logging.StreamHandler(self.stream or sys.stderr)
        handler.setLevel(self.level)
        handler.setFormatter(self.formatter)
        return handler

    def _drop_handler(self) -> None:
        if self._handler is None:
            return
        self.target.removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def _swap_handler(self, sink: LogSink) -> None:
        self._drop_handler()
        self._handler = self._build_handler(sink)
        self.target.addHandler(self._handler)
        logger.debug("Diagnostic logging now goes to %s", self.describe(sink))

    def describe(self, sink: LogSink) -> str:
        return self.log_file if sink is LogSink.FILE else "terminal"
