"""The interactive read-eval loop and the command entry point."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from contextlib import suppress
from typing import TextIO

from .builtins import ShellExit
from .environment import ShellState, from_environ
from .executor import execute
from .expand import expand_tokens
from .heredoc import DEFAULT_DIRECTORY, HEREDOC_PREFIX, write_heredoc
from .lexer import LexerError, tokenize
from .parser import parse
from .syntax import ShellSyntaxError, validate
from .tokens import Token, TokenType

try:
    import readline  # noqa: F401  (gives input() line editing and history)
except ImportError:
    readline = None

PROMPT = "minishell> "
BLANKS = " \n\f\v\r\t"
HEREDOC_COUNTER = 2

ReadLine = Callable[[str], "str | None"]


def is_blank(line: str) -> bool:
    """Return True when line is empty or holds only whitespace."""
    return all(ch in BLANKS for ch in line)


def _read_input(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """One shell session: its state, its streams and its line reader."""

    def __init__(
        self,
        state: ShellState | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        read_line: ReadLine | None = None,
        heredoc_dir: str | os.PathLike = DEFAULT_DIRECTORY,
    ) -> None:
        self.state = state if state is not None else ShellState(env=from_environ())
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.read_line = read_line if read_line is not None else _read_input
        self.heredoc_dir = heredoc_dir

    def _collect_heredocs(self, tokens: list[Token]) -> None:
        """Replace each here-document delimiter by the file holding its body."""
        for pos, token in enumerate(tokens):
            if token.type is not TokenType.HEREDOC:
                continue
            target = pos + 1
            if target < len(tokens) and tokens[target].type is TokenType.WSPACE:
                target += 1
            if target >= len(tokens):
                continue
            self.state.heredoc_count = HEREDOC_COUNTER
            path = write_heredoc(
                tokens[target].content,
                self.read_line,
                self.heredoc_dir,
                self.state.heredoc_count,
            )
            tokens[target] = Token(TokenType.WORD, str(path))

    def run_line(self, line: str) -> int:
        """Tokenize, check, expand, parse and run one line; return the status.

        Lexical and syntax errors are reported and leave the status as it was.
        ShellExit from the exit builtin propagates.
        """
        if is_blank(line):
            return self.state.status
        try:
            tokens = validate(tokenize(line))
        except (LexerError, ShellSyntaxError) as exc:
            self.err.write(f"{exc}\n")
            return self.state.status
        if not tokens:
            return self.state.status
        self._collect_heredocs(tokens)
        tokens = expand_tokens(tokens, self.state.env, self.state.status)
        commands = parse(tokens)
        return execute(commands, tokens, self.state, self.out, self.err)

    def _remove_heredoc_file(self) -> None:
        with suppress(OSError):
            os.unlink(os.path.join(self.heredoc_dir, HEREDOC_PREFIX))

    def loop(self, read_line: ReadLine | None = None) -> int:
        """Read and run lines until end of input or ``exit``; return the exit code."""
        if read_line is not None:
            self.read_line = read_line
        while True:
            try:
                line = self.read_line(PROMPT)
            except KeyboardInterrupt:
                self.out.write("\n")
                continue
            if line is None:
                self.out.write("exit\n")
                return 0
            if is_blank(line):
                continue
            if line == "exit":
                return 0
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.code
            finally:
                self._remove_heredoc_file()


def main(argv: list[str] | None = None) -> int:
    """Start an interactive shell; arguments are refused."""
    if argv is None:
        argv = sys.argv[1:]
    if argv:
        print("the prog works without args")
        return 0
    return Shell().loop()


if __name__ == "__main__":
    sys.exit(main())