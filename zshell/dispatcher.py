# zshell/dispatcher.py
import logging
import re
from typing import List, Tuple

from .cli_commands import CommandRegistry

logger = logging.getLogger(__name__)

_DELIMITERS = re.compile(r"[;\n]")


def split_commands(line: str) -> List[str]:
    """Split one raw input line into command pieces, keeping their order."""
    return _DELIMITERS.split(line)


def tokenize(piece: str) -> Tuple[str, List[str]]:
    """Return (name, args) for a non-empty command piece."""
    tokens = piece.split()
    return tokens[0], tokens[1:]


def evaluate_command(line: str, registry: CommandRegistry) -> int:
    """
    Run every command found in ``line`` left to right.
    A failing piece never stops the ones after it.
    Returns how many handlers were invoked.
    """
    if not line or not line.strip():
        return 0

    invoked = 0
    for piece in split_commands(line):
        piece = piece.strip()
        if not piece:
            print("Empty command, skipping.")
            continue

        name, args = tokenize(piece)
        logger.debug("Dispatching '%s' with args %s", name, args)
        if registry.execute_command(name, args or None):
            invoked += 1
    return invoked
