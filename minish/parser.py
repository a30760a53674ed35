"""Turn a validated token list into pipeline commands."""

from __future__ import annotations

from .syntax import SYNTAX_ERROR, ShellSyntaxError
from .tokens import Command, Redirection, Token, TokenType


def split_pipeline(tokens: list[Token]) -> list[list[Token]]:
    """Split tokens at pipes into one token list per pipeline stage.

    A pipe that is the very last token stays in the final stage.
    """
    if not tokens:
        return []
    segments: list[list[Token]] = [[]]
    last = len(tokens) - 1
    for pos, token in enumerate(tokens):
        if token.type is TokenType.PIPE and pos != last:
            segments.append([])
        else:
            segments[-1].append(token)
    return segments


def _target_index(tokens: list[Token], pos: int) -> int:
    """Index of the file name belonging to the redirection at pos."""
    target = pos + 1
    if target < len(tokens) and tokens[target].type is TokenType.WSPACE:
        target += 1
    if target >= len(tokens):
        raise ShellSyntaxError(SYNTAX_ERROR)
    return target


def _redirections(tokens: list[Token]) -> list[Redirection]:
    found = []
    pos = 0
    while pos < len(tokens):
        token = tokens[pos]
        if token.is_redirection():
            target = tokens[_target_index(tokens, pos)]
            found.append(Redirection(token.type, target.content))
            pos += 1
        pos += 1
    return found


def _words(tokens: list[Token]) -> list[str]:
    parts = []
    pos = 0
    last = len(tokens) - 1
    while pos < len(tokens):
        token = tokens[pos]
        if token.type is TokenType.WSPACE and pos == last:
            break
        if token.is_redirection():
            pos = _target_index(tokens, pos)
        else:
            parts.append(token.content)
        pos += 1
    return [word for word in "".join(parts).split(" ") if word]


def build_command(tokens: list[Token]) -> Command:
    """Build one command from the tokens of a single pipeline stage.

    Token contents are joined and split on spaces to form the arguments;
    each redirection takes the single token that follows it as its target.
    """
    return Command(argv=_words(tokens), redirections=_redirections(tokens))


def parse(tokens: list[Token]) -> list[Command]:
    """Parse a token list into the commands of a pipeline."""
    return [build_command(segment) for segment in split_pipeline(tokens)]