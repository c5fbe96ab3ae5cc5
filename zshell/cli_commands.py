"""
Central registry for shell commands.

Each command is a `Command` dataclass instance holding its name, description,
handler and minimum argument count. Handlers come in two shapes:

• `Simple(fn)`   – ``fn()`` takes no arguments.
• `WithArgs(fn)` – ``fn(args)`` receives the list of argument tokens.

Aliases map an alternate name to a target name and are only resolved at
lookup time, so an alias may be declared before its target exists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available."


# ---------------------------------------------------------------------------
#  Errors
# ---------------------------------------------------------------------------
class ShellError(Exception):
    """Base class for every error raised by the shell core."""


class DuplicateCommandError(ShellError):
    """A command or alias name was registered twice."""


class UnknownCommandError(ShellError):
    """No command is registered under the (resolved) name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown command: {name}")
        self.name = name


class AliasResolutionError(ShellError):
    """Alias chain loops back on itself."""

    def __init__(self, chain: Sequence[str]):
        super().__init__(f"Alias cycle detected: {' -> '.join(chain)}")
        self.chain = list(chain)


class ArityError(ShellError):
    """Fewer arguments than the command's declared minimum."""

    def __init__(self, name: str, min_args: int, given: int):
        plural = "" if min_args == 1 else "s"
        super().__init__(
            f"{name} requires at least {min_args} argument{plural}, got {given}."
        )
        self.name = name
        self.min_args = min_args
        self.given = given


# ---------------------------------------------------------------------------
#  Handler variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Simple:
    fn: Callable[[], None]


@dataclass(frozen=True, slots=True)
class WithArgs:
    fn: Callable[[List[str]], None]


Handler = Union[Simple, WithArgs]


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    description: Optional[str]
    handler: Handler
    min_args: Optional[int] = None

    @property
    def takes_args(self) -> bool:
        return isinstance(self.handler, WithArgs)


def _as_handler(handler, min_args: Optional[int]) -> Handler:
    if isinstance(handler, (Simple, WithArgs)):
        return handler
    if not callable(handler):
        raise TypeError(f"Command handler must be callable, got {type(handler).__name__}")
    # Bare callables are taken as argument handlers only when they declare a minimum.
    return WithArgs(handler) if min_args is not None else Simple(handler)


class CommandRegistry:
    """
    Owns the name → Command mapping and the alias table.

    Built once by the CLI at start-up and handed to the dispatcher by
    reference. Registration order is preserved for `help()`.
    """

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._aliases: Dict[str, str] = {}

    # ---------------------------------------------------------------------
    #  Registration
    # ---------------------------------------------------------------------
    def add_command(
        self,
        name: str,
        description: Optional[str] = None,
        handler: Handler | Callable | None = None,
        min_args: Optional[int] = None,
    ) -> None:
        """Register a new command. Raises on duplicates."""
        if handler is None:
            raise TypeError(f"Command '{name}' registered without a handler")
        if name in self._commands:
            raise DuplicateCommandError(f"Duplicate command registered: {name}")
        if name in self._aliases:
            raise DuplicateCommandError(f"Command name already used as an alias: {name}")
        if min_args is not None and min_args < 0:
            raise ValueError(f"min_args must be >= 0, got {min_args}")

        command = Command(name, description, _as_handler(handler, min_args), min_args)
        self._commands[name] = command
        logger.debug("Registered command '%s' (min_args=%s)", name, min_args)

    def add_alias(self, alias_name: str, target_name: str) -> None:
        """
        Map ``alias_name`` to ``target_name``. The target is not checked here;
        a dangling alias only fails when it is executed.
        """
        if alias_name in self._aliases:
            raise DuplicateCommandError(f"Duplicate alias registered: {alias_name}")
        if alias_name in self._commands:
            raise DuplicateCommandError(f"Alias shadows a registered command: {alias_name}")
        self._aliases[alias_name] = target_name
        if target_name not in self._commands and target_name not in self._aliases:
            logger.debug("Alias '%s' points at unregistered '%s'", alias_name, target_name)

    # ---------------------------------------------------------------------
    #  Lookup
    # ---------------------------------------------------------------------
    def resolve_name(self, name: str) -> str:
        """Follow the alias chain to its canonical name."""
        chain = [name]
        seen = {name}
        current = name
        while current in self._aliases:
            current = self._aliases[current]
            chain.append(current)
            if current in seen:
                raise AliasResolutionError(chain)
            seen.add(current)
        return current

    def resolve(self, name: str) -> Command:
        canonical = self.resolve_name(name)
        command = self._commands.get(canonical)
        if command is None:
            raise UnknownCommandError(name)
        return command

    def get(self, name: str) -> Optional[Command]:
        """Fetch a command by name or alias, or return None."""
        try:
            return self.resolve(name)
        except ShellError:
            return None

    def commands(self) -> List[Command]:
        return list(self._commands.values())

    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def names(self) -> List[str]:
        """Every invocable name, commands first then aliases."""
        return list(self._commands) + list(self._aliases)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._commands)

    # ---------------------------------------------------------------------
    #  Execution
    # ---------------------------------------------------------------------
    def execute_command(self, name: str, args: Optional[Sequence[str]] = None) -> bool:
        """
        Resolve ``name`` and run its handler.

        Every failure is reported to the user and logged; nothing but
        ``SystemExit``/``KeyboardInterrupt`` escapes. Returns True only when
        the handler was actually invoked.
        """
        arg_list = list(args) if args else []
        try:
            command = self.resolve(name)
            if command.takes_args:
                min_args = command.min_args or 0
                if len(arg_list) < min_args:
                    raise ArityError(command.name, min_args, len(arg_list))
        except ShellError as e:
            print(f"\033[91m{e}\033[0m")
            logger.info("Command '%s' rejected: %s", name, e)
            return False

        handler = command.handler
        try:
            if isinstance(handler, WithArgs):
                handler.fn(arg_list)
            else:
                if arg_list:
                    logger.debug("Command '%s' takes no arguments; ignoring %s", command.name, arg_list)
                handler.fn()
        except Exception as e:
            print(f"\033[91mError running '{command.name}': {e}\033[0m")
            logger.error("Handler for '%s' failed", command.name, exc_info=True)
            return False
        return True

    # ---------------------------------------------------------------------
    #  Help listing
    # ---------------------------------------------------------------------
    def help(self) -> str:
        """Listing of every command in registration order, then aliases."""
        if not self._commands:
            return "No commands registered."
        width = max(len(name) for name in self._commands)
        lines = ["Available commands:"]
        for command in self._commands.values():
            desc = command.description or NO_DESCRIPTION
            lines.append(f"  {command.name.ljust(width)}  {desc}")
        if self._aliases:
            lines.append("")
            lines.append("Aliases:")
            for alias, target in self._aliases.items():
                lines.append(f"  {alias} -> {target}")
        return "\n".join(lines)
