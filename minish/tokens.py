"""Token, redirection and command types shared by the lexer, parser and executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class TokenType(IntEnum):
    """Kinds of token produced by the lexer.

    The numeric values matter: the redirection kinds occupy the range 2..5.
    """

    WSPACE = 0
    PIPE = 1
    HEREDOC = 2
    APPEND = 3
    REDIN = 4
    REDOUT = 5
    QUOTE = 6
    DBQUOTE = 7
    WORD = 8
    DOLLAR_SIGN = 9
    NEW_LINE = 10
    EXIT_STATUS = 11


REDIRECTION_TYPES = frozenset(
    {TokenType.HEREDOC, TokenType.APPEND, TokenType.REDIN, TokenType.REDOUT}
)

# Search path used when the shell starts with an empty environment.
PATH_STD = "/usr/bin:/bin:/usr/sbin:/sbin:"


@dataclass
class Token:
    """One lexical token; ``content`` may be rewritten by expansion."""

    type: TokenType
    content: str

    def is_redirection(self) -> bool:
        """Return True for ``<``, ``>``, ``<<`` and ``>>`` tokens."""
        return self.type in REDIRECTION_TYPES


@dataclass
class Redirection:
    """A redirection attached to a command: its kind and target file."""

    type: TokenType
    filename: str


@dataclass
class Command:
    """One stage of a pipeline: its argument vector and redirections."""

    argv: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    def name(self) -> str | None:
        """Return the program name, or None when the command has no words."""
        return self.argv[0] if self.argv else None