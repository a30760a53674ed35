"""The shell's variable table and per-session state."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from .tokens import PATH_STD


class Environment:
    """Ordered table of variables.

    Each variable is stored as its full entry: ``NAME=value``, or just
    ``NAME`` when it was exported without a value.
    """

    def __init__(self, entries: Iterable[tuple[str, str]] = ()) -> None:
        self._entries: dict[str, str] = dict(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"Environment({list(self._entries.items())!r})"

    def entry(self, name: str) -> str | None:
        """Return the stored entry for name, or None."""
        return self._entries.get(name)

    def lookup(self, name: str) -> str | None:
        """Return the value of name, or None if unset or set without a value."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        _, sep, value = entry.partition("=")
        return value if sep else None

    def define(self, name: str, entry: str) -> None:
        """Store entry under name, keeping the position of an existing variable."""
        self._entries[name] = entry

    def set_value(self, name: str, value: str) -> None:
        """Set name to value."""
        self._entries[name] = f"{name}={value}"

    def append_value(self, name: str, value: str) -> None:
        """Append value to the current value of name."""
        entry = self._entries.get(name)
        if entry is None or "=" not in entry:
            self.set_value(name, value)
        else:
            self._entries[name] = entry + value

    def unset(self, name: str) -> bool:
        """Remove name; return whether it was present."""
        return self._entries.pop(name, None) is not None

    def names(self) -> list[str]:
        """Return variable names in definition order."""
        return list(self._entries)

    def exported(self) -> list[str]:
        """Return every entry, in order, as handed to child programs."""
        return list(self._entries.values())

    def search_path(self) -> str | None:
        """Return the value of the first variable whose name contains PATH."""
        for name, entry in self._entries.items():
            if "PATH" in name:
                _, sep, value = entry.partition("=")
                return value if sep else None
        return None


def from_environ(
    environ: Mapping[str, str] | None = None, cwd: str | None = None
) -> Environment:
    """Build the shell environment from the process environment.

    An empty environment gets PATH, SHLVL and PWD defaults.
    """
    if environ is None:
        environ = os.environ
    if not environ:
        directory = cwd if cwd is not None else os.getcwd()
        return Environment(
            [
                ("PATH", f"PATH={PATH_STD}"),
                ("SHLVL", "SHLVL=1"),
                ("PWD", f"PWD={directory}"),
            ]
        )
    return Environment((name, f"{name}={value}") for name, value in environ.items())


@dataclass
class ShellState:
    """Mutable state of one shell session."""

    env: Environment = field(default_factory=Environment)
    status: int = 0
    heredoc_count: int = 0
    oldpwd_seen: bool = False
    cd_toggled: bool = False