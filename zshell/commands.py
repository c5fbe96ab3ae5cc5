"""
Built-in shell commands and their registration.

Handlers only print; `exit` is the one that ends the process.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from prompt_toolkit.history import History

from .cli_commands import CommandRegistry, Simple, WithArgs
from .history import recent_entries

logger = logging.getLogger(__name__)


def say_hello() -> None:
    print("Hello World!")


def exit_shell() -> None:
    print("Exiting...")
    logger.info("Exit requested by user")
    sys.exit(0)


def clear_screen() -> None:
    print("\033[H\033[J", end="", flush=True)


def echo(args: List[str]) -> None:
    print(" ".join(args))


def make_help(registry: CommandRegistry):
    def show_help() -> None:
        print(registry.help())
    return show_help


def make_history(history: Optional[History]):
    def show_history(args: List[str]) -> None:
        if history is None:
            print("\033[93mHistory is not available.\033[0m")
            return
        limit = None
        if args:
            try:
                limit = int(args[0])
            except ValueError:
                limit = -1
            if limit < 0:
                print(f"\033[91mUsage: history [count] (got '{args[0]}')\033[0m")
                return
        entries = recent_entries(history, limit)
        if not entries:
            print("\033[93mNo history yet.\033[0m")
            return
        total = len(history.get_strings())
        start = total - len(entries) + 1
        for number, line in enumerate(entries, start=start):
            print(f"{number:>5}  {line}")
    return show_history


def register_commands(registry: CommandRegistry, history: Optional[History] = None) -> None:
    """Register every built-in command and alias on ``registry``."""
    registry.add_command(
        "hello",
        'Displays "Hello World"!',
        Simple(say_hello),
    )
    registry.add_command(
        "exit",
        "Exits the application gracefully.",
        Simple(exit_shell),
    )
    registry.add_command(
        "clear",
        "Clears the terminal screen.",
        Simple(clear_screen),
    )
    registry.add_command(
        "echo",
        "Prints the provided arguments back to the terminal.",
        WithArgs(echo),
        min_args=1,
    )
    registry.add_command(
        "help",
        "Displays a list of all available commands.",
        Simple(make_help(registry)),
    )
    registry.add_command(
        "history",
        "Shows previously entered lines (optionally only the last N).",
        WithArgs(make_history(history)),
        min_args=0,
    )

    registry.add_alias("cls", "clear")
    registry.add_alias("quit", "exit")
    registry.add_alias("?", "help")
    logger.debug("Registered %d built-in commands", len(registry))
