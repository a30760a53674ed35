"""Split an input line into shell tokens."""

from __future__ import annotations

from .tokens import Token, TokenType

WHITESPACE = " \t\v\f\r\n"
_WORD_STOP = " \t\r\n\"'\v\f|<>$"
_NAME_STOP = " \t\n!\"%'()*+,-./:;<=>?@[\\]^|`~$"
_DOLLAR_SYMBOLS = " \"%'()*+,-./:\\^`|~$"
_QUOTED_STOP = "$"

MISSING_QUOTE = "minishell: Missing quote"


class LexerError(ValueError):
    """Raised when a line cannot be tokenized, e.g. on an unclosed quote."""


def _run_end(text: str, pos: int, stop: str) -> int:
    """Return the index of the first character at or after pos that is in stop."""
    end = pos
    while end < len(text) and text[end] not in stop:
        end += 1
    return end


def _dollar(tokens: list[Token], text: str, pos: int) -> int:
    """Handle a ``$`` at pos; return the index of the last character consumed."""
    if text[pos] != "$":
        return pos
    nxt = text[pos + 1] if pos + 1 < len(text) else ""
    if nxt and nxt in _DOLLAR_SYMBOLS:
        tokens.append(Token(TokenType.WORD, "$" + nxt))
        return pos + 1
    if nxt == "?":
        tokens.append(Token(TokenType.EXIT_STATUS, "$?"))
        return pos + 1
    if nxt and "0" <= nxt <= "9":
        tokens.append(Token(TokenType.DOLLAR_SIGN, nxt))
        return pos + 1
    if nxt:
        start = pos + 1
        end = _run_end(text, start, _NAME_STOP)
        if end > start:
            tokens.append(Token(TokenType.DOLLAR_SIGN, text[start:end]))
            return end - 1
        # A '$' followed by a character that cannot start a name: both vanish.
        return start
    tokens.append(Token(TokenType.WORD, "$"))
    return pos


def _quoted_body(tokens: list[Token], body: str) -> None:
    """Tokenize the inside of double quotes: literal runs and ``$`` expansions."""
    pos = 0
    while pos < len(body):
        end = _run_end(body, pos, _QUOTED_STOP)
        if end > pos:
            tokens.append(Token(TokenType.WORD, body[pos:end]))
            pos = end - 1
        pos = _dollar(tokens, body, pos)
        pos += 1


def _closing_quote(text: str, pos: int, quote: str) -> int:
    close = text.find(quote, pos + 1)
    if close == -1:
        raise LexerError(MISSING_QUOTE)
    return close


def _double_quoted(tokens: list[Token], text: str, pos: int) -> int:
    close = _closing_quote(text, pos, '"')
    body = text[pos + 1 : close]
    if body:
        _quoted_body(tokens, body)
    elif close + 1 == len(text):
        tokens.append(Token(TokenType.WORD, ""))
    return close


def _single_quoted(tokens: list[Token], text: str, pos: int) -> int:
    close = _closing_quote(text, pos, "'")
    tokens.append(Token(TokenType.WORD, text[pos + 1 : close]))
    return close


def _operator(tokens: list[Token], text: str, pos: int) -> int:
    """Handle a pipe or redirection operator at pos; return the last index used."""
    ch = text[pos]
    if ch == "|":
        tokens.append(Token(TokenType.PIPE, "|"))
    elif text.startswith("<<", pos):
        tokens.append(Token(TokenType.HEREDOC, "<<"))
        return pos + 1
    elif ch == "<":
        tokens.append(Token(TokenType.REDIN, "<"))
    elif text.startswith(">>", pos):
        tokens.append(Token(TokenType.APPEND, ">>"))
        return pos + 1
    elif ch == ">":
        tokens.append(Token(TokenType.REDOUT, ">"))
    return pos


def tokenize(line: str) -> list[Token]:
    """Split line into tokens.

    Runs of whitespace become a single WSPACE token. Raises LexerError when a
    quote is left open.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(line):
        end = pos
        while end < len(line) and line[end] in WHITESPACE:
            end += 1
        if end > pos:
            tokens.append(Token(TokenType.WSPACE, " "))
            pos = end
            if pos >= len(line):
                break
        end = _run_end(line, pos, _WORD_STOP)
        if end > pos:
            tokens.append(Token(TokenType.WORD, line[pos:end]))
            pos = end - 1
        pos = _operator(tokens, line, pos)
        pos = _dollar(tokens, line, pos)
        if line[pos] == '"':
            pos = _double_quoted(tokens, line, pos)
        elif line[pos] == "'":
            pos = _single_quoted(tokens, line, pos)
        pos += 1
    return tokens