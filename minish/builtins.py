"""Commands the shell runs itself instead of starting a child program."""

from __future__ import annotations

import errno
import os
from collections.abc import Callable, Sequence
from itertools import dropwhile
from typing import TextIO

from .environment import ShellState
from .export import export

BUILTINS = frozenset({"echo", "cd", "export", "unset", "exit", "pwd", "env"})

MESSAGE_FOLDER = (
    "cd: error retrieving current  directory: getcwd: cannot access parent "
    "directories:  No such file or directory\n"
)
OLDPWD_NOT_SET = "minishell : cd: OLDPWD not set\n"

_FOLDER_ERRORS = {
    errno.EACCES: "permission denied\n",
    errno.ENOENT: "Directory does not exist\n",
    errno.ENOTDIR: "is not a directory\n",
}


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with the given exit code."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def is_builtin(name: str | None) -> bool:
    """Return True when name is one of the shell's own commands."""
    return name in BUILTINS


def _is_n_flag(arg: str) -> bool:
    return len(arg) >= 2 and arg[0] == "-" and set(arg[1:]) == {"n"}


def echo(args: Sequence[str], out: TextIO) -> int | None:
    """Write args to out.

    A leading ``-n`` (or ``-nnn``) flag, possibly repeated, suppresses the
    newline and the words are joined by single spaces. Otherwise each word is
    followed by a space and the line ends with a newline.
    """
    if not args:
        out.write("\n")
        return None
    if _is_n_flag(args[0]):
        words = list(dropwhile(_is_n_flag, args[1:]))
        out.write(" ".join(words))
    else:
        out.write("".join(f"{word} " for word in args) + "\n")
    return 0


def env_command(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Print every variable that has a value; arguments are refused."""
    if len(argv) > 1:
        err.write(f"env: {argv[1]}: Too Many Argument \n")
        return 1
    for entry in state.env.exported():
        if "=" in entry:
            out.write(entry + "\n")
    return 0


def exit_command(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Raise ShellExit; with too many arguments report it and return 1."""
    if len(argv) < 2:
        err.write("exit\n")
        raise ShellExit(0)
    arg = argv[1]
    if not all("0" <= ch <= "9" for ch in arg):
        err.write(f"exit \nminishell: exit: {arg} numeric argument required\n")
        raise ShellExit(255)
    if len(argv) == 2:
        code = int(arg) if arg else 0
        state.status = code
        out.write("exit \n")
        raise ShellExit(code % 256)
    err.write(f"exit \nminishell: exit: {argv[2]} oo many arguments\n")
    return 1


def _getcwd() -> str | None:
    try:
        return os.getcwd()
    except OSError:
        return None


def _chdir(path: str) -> bool:
    try:
        os.chdir(path)
    except OSError:
        return False
    return True


def pwd(out: TextIO) -> int | None:
    """Print the current working directory."""
    out.write((_getcwd() or "") + "\n")
    return None


def _check_folder(name: str, out: TextIO) -> int | None:
    """Explain why name cannot be entered; return 1 when it cannot be opened."""
    try:
        with os.scandir(name):
            pass
    except OSError as exc:
        message = _FOLDER_ERRORS.get(exc.errno)
        if message:
            out.write(message)
        return 1
    return None


def _update_pwd(state: ShellState, previous: str | None) -> None:
    state.env.set_value("PWD", _getcwd() or "")
    if previous is not None:
        state.env.set_value("OLDPWD", previous)


def _switch_directory(state: ShellState, out: TextIO, err: TextIO) -> None:
    if "OLDPWD" in state.env:
        state.oldpwd_seen = True
    if not state.oldpwd_seen:
        err.write(OLDPWD_NOT_SET)
        return
    name = "PWD" if state.cd_toggled else "OLDPWD"
    state.cd_toggled = not state.cd_toggled
    target = state.env.lookup(name)
    if target is not None:
        _chdir(target)
    out.write((_getcwd() or "") + "\n")


def cd(argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO) -> int | None:
    """Change directory and keep PWD and OLDPWD up to date.

    With no argument or ``~`` go to HOME; an argument starting with ``-``
    alternates between OLDPWD and PWD and prints the new directory.
    """
    here = _getcwd()
    target = argv[1] if len(argv) > 1 else None
    if target == ".":
        if here is None or not _chdir(here):
            err.write(MESSAGE_FOLDER)
        return None
    if target is None or target == "~":
        home = os.environ.get("HOME")
        if home is not None:
            _chdir(home)
        _update_pwd(state, here)
        return None
    if target.startswith("-"):
        _switch_directory(state, out, err)
        return None
    if _chdir(target):
        _update_pwd(state, here)
        return None
    return _check_folder(target, out)


def unset(argv: Sequence[str], state: ShellState) -> int | None:
    """Remove variables.

    The first variable of the table is removed only when it is named by the
    first argument, in which case the other arguments are ignored.
    """
    names = state.env.names()
    if not names or len(argv) < 2:
        return None
    head = names[0]
    if argv[1] == head:
        state.env.unset(head)
        return None
    for name in argv[1:]:
        if name != head:
            state.env.unset(name)
    return None


_Handler = Callable[[Sequence[str], ShellState, TextIO, TextIO], "int | None"]

_HANDLERS: dict[str, _Handler] = {
    "cd": cd,
    "exit": exit_command,
    "env": env_command,
    "export": export,
    "echo": lambda argv, state, out, err: echo(argv[1:], out),
    "pwd": lambda argv, state, out, err: pwd(out),
    "unset": lambda argv, state, out, err: unset(argv, state),
}


def run_builtin(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Run the builtin named by argv[0] and return the shell's status after it."""
    handler = _HANDLERS.get(argv[0]) if argv else None
    if handler is not None:
        status = handler(argv, state, out, err)
        if status is not None:
            state.status = status
    return state.status