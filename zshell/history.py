"""
Durable line history for the shell.

Built on prompt_toolkit's ``FileHistory`` so the prompt's up-arrow navigation
and auto-suggest see lines from earlier sessions. Reading or writing the file
is best effort: a missing, unreadable or unwritable file only produces a
debug log line and an empty (or non-persisted) history.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from prompt_toolkit.history import FileHistory

logger = logging.getLogger(__name__)


class SafeFileHistory(FileHistory):
    """``FileHistory`` whose disk errors never reach the prompt loop."""

    def load_history_strings(self) -> Iterable[str]:
        try:
            # Materialize here so errors raised while reading are caught.
            strings: List[str] = list(super().load_history_strings())
        except (OSError, ValueError) as e:
            logger.debug("No previous history (%s): %s", self.filename, e)
            return []
        logger.debug("Loaded %d history entries from %s", len(strings), self.filename)
        return strings

    def store_string(self, string: str) -> None:
        try:
            super().store_string(string)
        except OSError as e:
            logger.debug("Could not persist history line to %s: %s", self.filename, e)


def recent_entries(history: FileHistory, limit: int | None = None) -> List[str]:
    """Session history oldest first, optionally trimmed to the last ``limit`` lines."""
    strings = history.get_strings()
    if limit is not None and limit >= 0:
        strings = strings[-limit:] if limit else []
    return strings
