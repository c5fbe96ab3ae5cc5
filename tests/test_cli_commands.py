from __future__ import annotations

from typing import List

import pytest

from zshell.cli_commands import (
    NO_DESCRIPTION,
    AliasResolutionError,
    CommandRegistry,
    DuplicateCommandError,
    Simple,
    UnknownCommandError,
    WithArgs,
)


class Recorder:
    def __init__(self) -> None:
        self.calls: List[List[str]] = []

    def simple(self) -> None:
        self.calls.append([])

    def with_args(self, args: List[str]) -> None:
        self.calls.append(list(args))


def _registry() -> tuple[CommandRegistry, Recorder]:
    rec = Recorder()
    registry = CommandRegistry()
    registry.add_command("ping", "Simple command", Simple(rec.simple))
    registry.add_command("say", "Needs one arg", WithArgs(rec.with_args), min_args=1)
    return registry, rec


def test_exact_name_invokes_handler_once() -> None:
    registry, rec = _registry()

    assert registry.execute_command("ping") is True
    assert rec.calls == [[]]

    assert registry.execute_command("say", ["hi", "there"]) is True
    assert rec.calls == [[], ["hi", "there"]]


def test_alias_behaves_like_target() -> None:
    registry, rec = _registry()
    registry.add_alias("talk", "say")

    registry.execute_command("talk", ["a"])
    registry.execute_command("say", ["a"])
    assert rec.calls == [["a"], ["a"]]

    assert registry.execute_command("talk") is False
    assert rec.calls == [["a"], ["a"]]


def test_unknown_command_reports_and_invokes_nothing(capsys) -> None:
    registry, rec = _registry()

    assert registry.execute_command("nope", ["x"]) is False
    assert rec.calls == []
    assert "Unknown command: nope" in capsys.readouterr().out


def test_min_args_enforced(capsys) -> None:
    registry, rec = _registry()

    assert registry.execute_command("say") is False
    assert registry.execute_command("say", []) is False
    assert rec.calls == []
    assert "say requires at least 1 argument, got 0." in capsys.readouterr().out

    assert registry.execute_command("say", ["only"]) is True
    assert rec.calls == [["only"]]


def test_simple_handler_ignores_extra_args() -> None:
    registry, rec = _registry()

    assert registry.execute_command("ping", ["extra"]) is True
    assert rec.calls == [[]]


def test_bare_callables_are_wrapped_by_min_args() -> None:
    rec = Recorder()
    registry = CommandRegistry()
    registry.add_command("plain", None, rec.simple)
    registry.add_command("takes", None, rec.with_args, min_args=0)

    assert isinstance(registry.resolve("plain").handler, Simple)
    assert isinstance(registry.resolve("takes").handler, WithArgs)

    registry.execute_command("takes")
    assert rec.calls == [[]]


def test_duplicate_command_rejected() -> None:
    registry, _ = _registry()

    with pytest.raises(DuplicateCommandError):
        registry.add_command("ping", "again", Simple(lambda: None))


def test_duplicate_alias_and_shadowing_rejected() -> None:
    registry, _ = _registry()
    registry.add_alias("p", "ping")

    with pytest.raises(DuplicateCommandError):
        registry.add_alias("p", "say")
    with pytest.raises(DuplicateCommandError):
        registry.add_alias("ping", "say")
    with pytest.raises(DuplicateCommandError):
        registry.add_command("p", None, Simple(lambda: None))


def test_dangling_alias_fails_at_lookup_only(capsys) -> None:
    registry, rec = _registry()
    registry.add_alias("ghost", "missing")

    with pytest.raises(UnknownCommandError):
        registry.resolve("ghost")
    assert registry.execute_command("ghost") is False
    assert rec.calls == []
    assert "Unknown command: ghost" in capsys.readouterr().out


def test_forward_declared_alias_resolves_once_target_exists() -> None:
    rec = Recorder()
    registry = CommandRegistry()
    registry.add_alias("later", "ping")
    registry.add_command("ping", None, Simple(rec.simple))

    assert registry.execute_command("later") is True
    assert rec.calls == [[]]


def test_alias_chain_resolves_to_fixed_point() -> None:
    registry, rec = _registry()
    registry.add_alias("b", "ping")
    registry.add_alias("a", "b")

    assert registry.resolve_name("a") == "ping"
    assert registry.execute_command("a") is True
    assert rec.calls == [[]]


def test_alias_cycle_is_reported_not_looped(capsys) -> None:
    registry, rec = _registry()
    registry.add_alias("x", "y")
    registry.add_alias("y", "x")

    with pytest.raises(AliasResolutionError) as excinfo:
        registry.resolve("x")
    assert excinfo.value.chain == ["x", "y", "x"]

    assert registry.execute_command("x") is False
    assert rec.calls == []
    assert "Alias cycle detected: x -> y -> x" in capsys.readouterr().out


def test_failing_handler_is_reported(capsys) -> None:
    registry = CommandRegistry()

    def boom() -> None:
        raise RuntimeError("kaboom")

    registry.add_command("boom", None, Simple(boom))

    assert registry.execute_command("boom") is False
    assert "Error running 'boom': kaboom" in capsys.readouterr().out


def test_system_exit_from_handler_propagates() -> None:
    registry = CommandRegistry()

    def leave() -> None:
        raise SystemExit(0)

    registry.add_command("leave", None, Simple(leave))

    with pytest.raises(SystemExit):
        registry.execute_command("leave")


def test_help_lists_commands_in_registration_order() -> None:
    registry, _ = _registry()
    registry.add_command("zzz", None, Simple(lambda: None))
    registry.add_command("aaa", "First letter", Simple(lambda: None))
    registry.add_alias("z", "zzz")

    text = registry.help()
    lines = text.splitlines()

    names = [line.split()[0] for line in lines[1:5]]
    assert names == ["ping", "say", "zzz", "aaa"]
    assert NO_DESCRIPTION in lines[3]
    assert "z -> zzz" in text


def test_views() -> None:
    registry, _ = _registry()
    registry.add_alias("p", "ping")

    assert len(registry) == 2
    assert "p" in registry
    assert "nope" not in registry
    assert registry.names() == ["ping", "say", "p"]
    assert registry.aliases() == {"p": "ping"}
    assert registry.get("nope") is None
    assert registry.get("p").name == "ping"
