#!/usr/bin/env python
"""
Interactive command-line interface for zshell.

Reads one line at a time, splits it into commands on ``;`` or newlines and
runs each through the command registry. Press the backtick key while typing
to flip diagnostic logging between the terminal and the log file.
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style

from .cli_commands import CommandRegistry
from .commands import register_commands
from .constants import (
    DOTENV_LOADED,
    HISTORY_FILE,
    LOG_FILE,
    LOG_FORMAT,
    LOG_LEVEL,
    SHELL_LABEL,
    TOGGLE_KEY,
)
from .dispatcher import evaluate_command, split_commands
from .history import SafeFileHistory
from .log_toggle import OutputSinkToggle

logger = logging.getLogger(__name__)

cli_style = Style.from_dict({
    "prompt": "bold #ffffff",
    "auto-suggestion": "bold #888888",
    "completion-menu.completion": "bg:#1e1e1e #bcbcbc",
    "completion-menu.completion.current": "bg:#005f5f #ffffff bold",
    "completion-menu.meta": "#6c6c6c italic",
})


class CommandCompleter(Completer):
    """Completes the command name of the piece currently being typed."""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def get_completions(self, document: Document, complete_event):
        piece = split_commands(document.text_before_cursor)[-1].lstrip()
        # Only the first token of a piece is a command name.
        if " " in piece or "\t" in piece:
            return
        for name in self.registry.names():
            if name.startswith(piece):
                command = self.registry.get(name)
                meta = command.description if command and command.description else ""
                yield Completion(text=name, start_position=-len(piece), display_meta=meta)


def prompt_text(now: Optional[datetime] = None) -> str:
    """``[HH:MM:SS.mmm/SHELL] >>`` followed by a tab."""
    now = now or datetime.now()
    timestamp = now.strftime("%H:%M:%S.%f")[:-3]
    return f"[{timestamp}/{SHELL_LABEL}] >>\t"


def render_prompt() -> FormattedText:
    return FormattedText([("class:prompt", prompt_text())])


def build_key_bindings(toggle: OutputSinkToggle) -> KeyBindings:
    kb = KeyBindings()

    @kb.add(TOGGLE_KEY)
    def _(event):
        """Flip the log sink; the key itself is never inserted."""
        run_in_terminal(toggle.toggle)

    return kb


def configure_logging(verbose: bool = False, log_file: str = LOG_FILE) -> OutputSinkToggle:
    """Reset the root logger and hand its only handler to the sink toggle."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)

    # Clear existing handlers to avoid duplication in repeated runs
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.setLevel(level)

    toggle = OutputSinkToggle(
        log_file=log_file,
        target=root,
        level=level,
        formatter=logging.Formatter(LOG_FORMAT),
    )
    toggle.install()
    return toggle


def build_session(registry: CommandRegistry, toggle: OutputSinkToggle,
                  history_file: str = HISTORY_FILE) -> PromptSession:
    return PromptSession(
        history=SafeFileHistory(history_file),
        auto_suggest=AutoSuggestFromHistory(),
        completer=CommandCompleter(registry),
        complete_while_typing=False,
        key_bindings=build_key_bindings(toggle),
        style=cli_style,
    )


def repl(session, registry: CommandRegistry) -> None:
    """
    Read-dispatch loop. Only Ctrl+C, Ctrl+D or the ``exit`` command end it,
    and all three terminate the process.
    """
    while True:
        try:
            line = session.prompt(render_prompt())
        except KeyboardInterrupt:
            print("CTRL+C received, exiting...")
            sys.exit(0)
        except EOFError:
            print("Error: CTRL+D pressed. Exiting...")
            sys.exit(0)
        except Exception as e:
            print(f"Error: {e}")
            logger.error("Input error", exc_info=True)
            continue

        evaluate_command(line, registry)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="zshell interactive command shell")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level.")
    args = parser.parse_args(argv)

    toggle = configure_logging(verbose=args.verbose)
    if DOTENV_LOADED:
        logger.info(".env loaded.")
    if args.verbose:
        logger.info("Verbose logging enabled.")

    registry = CommandRegistry()
    session = build_session(registry, toggle)
    register_commands(registry, session.history)

    print("\n\033[1m\033[96mzshell\033[0m")
    print(f"\033[90mType 'help' for commands. Press {TOGGLE_KEY} to toggle log output to {LOG_FILE}.\033[0m")

    try:
        repl(session, registry)
    finally:
        toggle.close()


if __name__ == "__main__":
    main()
