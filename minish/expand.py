"""Variable, exit-status and tilde expansion of tokens."""

from __future__ import annotations

import os
from dataclasses import replace

from .environment import Environment
from .tokens import Token, TokenType

SHELL_NAME = "minishell"


def expand_variable(name: str, env: Environment) -> str:
    """Return the expansion of ``$name``.

    ``$0`` expands to the shell's name; unknown names expand to nothing.
    """
    if name in env:
        return env.lookup(name) or ""
    if len(env) and name == "0":
        return SHELL_NAME
    return ""


def expand_tokens(
    tokens: list[Token], env: Environment, status: int = 0, home: str | None = None
) -> list[Token]:
    """Return a copy of tokens with ``$NAME``, ``$?`` and a lone ``~`` expanded.

    When home is None the HOME of the process environment is used.
    """
    if home is None:
        home = os.environ.get("HOME")
    expanded = []
    for token in tokens:
        if token.type is TokenType.DOLLAR_SIGN:
            token = replace(token, content=expand_variable(token.content, env))
        elif token.type is TokenType.EXIT_STATUS:
            token = replace(token, content=str(status))
        elif token.type is TokenType.WORD and token.content == "~" and home is not None:
            token = replace(token, content=home)
        else:
            token = replace(token)
        expanded.append(token)
    return expanded