"""Syntax checks run on a token list before it is parsed."""

from __future__ import annotations

from .tokens import Token, TokenType

SYNTAX_ERROR = "minishell: syntax error near unexpected token `'"

_OPERATORS = frozenset({"<<", "<", ">", ">>"})


class ShellSyntaxError(ValueError):
    """Raised when a token list does not form a valid command line."""


def _error(text: str = "") -> ShellSyntaxError:
    return ShellSyntaxError(SYNTAX_ERROR + text)


def _is_operator(token: Token) -> bool:
    return token.is_redirection() and token.content in _OPERATORS


def check_pipes(tokens: list[Token]) -> list[Token]:
    """Reject a leading pipe, two pipes in a row and a trailing pipe.

    Returns the tokens unchanged when they pass.
    """
    if not tokens:
        return tokens
    first = tokens[0]
    if first.type is TokenType.PIPE:
        raise _error(first.content)
    for pos, token in enumerate(tokens):
        if token.type is not TokenType.PIPE:
            continue
        rest = tokens[pos + 1 :]
        if not rest:
            continue
        # Whitespace is skipped, but never past the final token.
        following = next(
            (t for t in rest[:-1] if t.type is not TokenType.WSPACE), rest[-1]
        )
        if following.type is TokenType.PIPE:
            raise _error(following.content)
    last = tokens[-1]
    if last.type is TokenType.PIPE and last.content.startswith("|"):
        raise _error(last.content)
    return tokens


def check_redirections(tokens: list[Token]) -> list[Token]:
    """Require every redirection operator to be followed by a target.

    Returns the tokens unchanged when they pass.
    """
    for pos, token in enumerate(tokens):
        if not _is_operator(token):
            continue
        rest = tokens[pos + 1 : pos + 3]
        if not rest:
            raise _error()
        following = rest[0]
        if following.type is TokenType.WSPACE and len(rest) > 1:
            continue
        if following.type not in (TokenType.WORD, TokenType.DOLLAR_SIGN):
            raise _error()
    return tokens


def validate(tokens: list[Token]) -> list[Token]:
    """Run the pipe and redirection checks; return the tokens when valid."""
    check_pipes(tokens)
    check_redirections(tokens)
    return tokens