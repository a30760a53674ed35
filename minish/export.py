"""The export builtin: defining variables and listing them."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TextIO

from .environment import Environment, ShellState

ERR_F = "minshell: export: `"
ERR_L = "': not a valid identifier\n"


def _is_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def _starts_with_letter(arg: str) -> bool:
    first = arg[:1]
    return first.isascii() and first.isalpha()


def is_valid_name(arg: str, strict: bool = False) -> bool:
    """Check the characters of a variable name.

    Letters, digits and ``_`` are always allowed; ``+`` only when not strict.
    """
    allowed = "_" if strict else "_+"
    return all(_is_alnum(ch) or ch in allowed for ch in arg)


def split_assignment(arg: str) -> tuple[str, str | None, bool]:
    """Split ``NAME=value`` or ``NAME+=value`` into (name, value, append)."""
    name, sep, value = arg.partition("=")
    append = "+=" in arg
    if append:
        name = name[:-1]
    return name, (value if sep else None), append


def declare_listing(env: Environment) -> list[str]:
    """Return ``declare -x`` lines for every entry, ordered by first character."""
    lines = []
    for entry in sorted(env.exported(), key=lambda item: item[:1]):
        parts = [part for part in entry.split("=") if part]
        if not parts:
            continue
        if len(parts) > 1:
            lines.append(f'declare -x {parts[0]}="{parts[1]}"')
        else:
            lines.append(f"declare -x {parts[0]}")
    return lines


def export(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int | None:
    """Define variables, or list them when no argument is given.

    Processing stops at the first invalid argument, and returns 1. An
    argument that does not itself start with a letter stops the whole run,
    and so does any later one. An argument without ``=`` reuses the value of
    the previous assignment on the same line.
    """
    args = list(argv[1:])
    env = state.env
    if not args:
        for line in declare_listing(env):
            out.write(line + "\n")
        return None
    value: str | None = None
    for index, arg in enumerate(args):
        if not all(_starts_with_letter(a) for a in args[index:]) or not is_valid_name(
            arg.partition("=")[0]
        ):
            err.write(ERR_F + arg + ERR_L)
            return 1
        name, new_value, append = split_assignment(arg)
        if new_value is not None:
            value = new_value
        if not is_valid_name(name, strict=True):
            err.write(ERR_F + arg + ERR_L)
            return 1
        if name not in env:
            env.define(name, name if value is None else f"{name}={value}")
        elif value is not None:
            if append:
                env.append_value(name, value)
            else:
                env.set_value(name, value)
    return None