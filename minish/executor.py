"""Running parsed commands: redirections, builtins, external programs and pipelines."""

from __future__ import annotations

import copy
import io
import os
import signal
import subprocess
import sys
import tempfile
from collections.abc import Sequence
from contextlib import suppress
from dataclasses import dataclass, field
from typing import IO, Any, TextIO

from .builtins import ShellExit, is_builtin, run_builtin
from .environment import Environment, ShellState
from .tokens import Command, Redirection, Token, TokenType

NO_SUCH_FILE = "No such file or directory\n"
RETURN_ERROR = 99


class RedirectionError(Exception):
    """Raised when an input redirection cannot be opened."""


class _LaunchError(Exception):
    """A program could not be started; carries the shell status to report."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


@dataclass
class _Streams:
    """Files opened for a command's redirections; the last of each kind wins."""

    stdin: TextIO | None = None
    stdout: TextIO | None = None
    errors: list[str] = field(default_factory=list)

    def set_stdin(self, handle: TextIO | None) -> None:
        if self.stdin is not None:
            self.stdin.close()
        self.stdin = handle

    def set_stdout(self, handle: TextIO | None) -> None:
        if self.stdout is not None:
            self.stdout.close()
        self.stdout = handle

    def close(self) -> None:
        self.set_stdin(None)
        self.set_stdout(None)

    def __enter__(self) -> _Streams:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class _Stage:
    process: subprocess.Popen | None = None
    status: int = 0
    captured: bool = False
    target: Any = None


def count_pipes(tokens: Sequence[Token]) -> int:
    """Return the number of pipe tokens."""
    return sum(1 for token in tokens if token.type is TokenType.PIPE)


def resolve_command(argv: Sequence[str], env: Environment) -> str | None:
    """Return the path to run for argv[0], or None when nothing matches.

    A name that is executable as given, or that contains a slash, is used
    unchanged; otherwise each directory of the search path is tried in turn.
    """
    if not argv:
        return None
    name = argv[0]
    if os.access(name, os.X_OK) or "/" in name:
        return name
    for directory in (env.search_path() or "").split(":"):
        if not directory:
            continue
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def open_redirections(redirections: Sequence[Redirection]) -> _Streams:
    """Open the files of redirections in order.

    Output files that cannot be opened are recorded in ``errors`` and
    skipped; an input or here-document file that cannot be opened raises
    RedirectionError. Here-document files are removed once opened.
    """
    streams = _Streams()
    for redirection in redirections:
        kind = redirection.type
        if kind in (TokenType.REDOUT, TokenType.APPEND):
            mode = "w" if kind is TokenType.REDOUT else "a"
            try:
                handle = open(redirection.filename, mode, encoding="utf-8")
            except OSError:
                streams.errors.append(NO_SUCH_FILE)
                if kind is TokenType.APPEND:
                    streams.set_stdout(None)
                continue
            streams.set_stdout(handle)
        elif kind in (TokenType.REDIN, TokenType.HEREDOC):
            try:
                handle = open(redirection.filename, encoding="utf-8")
            except OSError as exc:
                streams.close()
                raise RedirectionError(NO_SUCH_FILE) from exc
            if kind is TokenType.HEREDOC:
                with suppress(OSError):
                    os.unlink(redirection.filename)
            streams.set_stdin(handle)
    return streams


def status_from_returncode(returncode: int) -> int:
    """Map a child's return code to a shell status; signals give 128 + signal."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _flush(stream: Any) -> None:
    with suppress(AttributeError, OSError, ValueError):
        stream.flush()


def _stdin_argument(stdin: Any) -> tuple[Any, bytes | None]:
    if stdin is None:
        return None, None
    if _fileno(stdin) is not None:
        return stdin, None
    data = stdin.read()
    return subprocess.PIPE, data.encode() if isinstance(data, str) else data


def _stdout_argument(stdout: Any) -> tuple[Any, bool]:
    if stdout is None:
        return None, False
    if _fileno(stdout) is None:
        return subprocess.PIPE, True
    _flush(stdout)
    return stdout, False


def _child_environment(env: Environment) -> dict[str, str]:
    variables = {}
    for entry in env.exported():
        name, sep, value = entry.partition("=")
        if sep:
            variables[name] = value
    return variables


def _start(
    argv: Sequence[str], state: ShellState, stdin: Any, stdout: Any, err: TextIO
) -> subprocess.Popen:
    name = argv[0]
    path = resolve_command(argv, state.env)
    not_found = f"minishell : {name}: command not found \n"
    if path is None:
        err.write(not_found)
        raise _LaunchError(127)
    try:
        return subprocess.Popen(
            list(argv),
            executable=path,
            stdin=stdin,
            stdout=stdout,
            env=_child_environment(state.env),
        )
    except (FileNotFoundError, NotADirectoryError):
        err.write(not_found)
        raise _LaunchError(127) from None
    except PermissionError:
        err.write(f"minishell : {name}: : Permission denied \n")
        raise _LaunchError(126) from None
    except OSError:
        err.write("error ...\n")
        raise _LaunchError(RETURN_ERROR) from None


def _write_output(target: Any, data: bytes | None) -> None:
    if data:
        target.write(data.decode(errors="replace"))


def _report_signal(returncode: int) -> None:
    if returncode >= 0:
        return
    if -returncode == signal.SIGQUIT:
        sys.stderr.write("QUIT")
    sys.stdout.write("\n")


def _run_process(
    argv: Sequence[str], state: ShellState, stdin: Any, stdout: Any, err: TextIO
) -> int:
    if not argv:
        return 0
    stdin_arg, data = _stdin_argument(stdin)
    stdout_arg, captured = _stdout_argument(stdout)
    try:
        process = _start(argv, state, stdin_arg, stdout_arg, err)
    except _LaunchError as exc:
        return exc.status
    output, _ = process.communicate(data)
    if captured:
        _write_output(stdout, output)
    _report_signal(process.returncode)
    return status_from_returncode(process.returncode)


def run_external(
    command: Command, state: ShellState, stdin: Any = None, stdout: Any = None
) -> int:
    """Run command as a child program and return its exit status.

    The command's own redirections take precedence over stdin and stdout.
    When an input redirection fails nothing is run and the status is 0.
    """
    err = sys.stderr
    try:
        streams = open_redirections(command.redirections)
    except RedirectionError as exc:
        err.write(str(exc))
        return 0
    with streams:
        for message in streams.errors:
            err.write(message)
        source = streams.stdin if streams.stdin is not None else stdin
        target = streams.stdout if streams.stdout is not None else stdout
        return _run_process(command.argv, state, source, target, err)


def _execute_single(
    command: Command, state: ShellState, out: TextIO, err: TextIO
) -> int:
    name = command.name()
    if name is not None and not is_builtin(name):
        state.status = run_external(command, state, None, out)
        return state.status
    try:
        streams = open_redirections(command.redirections)
    except RedirectionError as exc:
        err.write(str(exc))
        state.status = 1
        return state.status
    with streams:
        for message in streams.errors:
            err.write(message)
            state.status = 1
        if name is None:
            return state.status
        target = streams.stdout if streams.stdout is not None else out
        return run_builtin(command.argv, state, target, err)


def _spool(text: str, opened: list[Any]) -> IO[bytes]:
    handle = tempfile.TemporaryFile()
    handle.write(text.encode())
    handle.seek(0)
    opened.append(handle)
    return handle


def _run_builtin_stage(command: Command, state: ShellState, err: TextIO) -> tuple[str, int]:
    """Run a builtin as one stage of a pipeline, isolated from the shell state."""
    buffer = io.StringIO()
    child = copy.deepcopy(state)
    try:
        run_builtin(command.argv, child, buffer, err)
    except ShellExit as exc:
        return buffer.getvalue(), exc.code
    return buffer.getvalue(), 1


def _execute_pipeline(
    commands: Sequence[Command], state: ShellState, out: TextIO, err: TextIO
) -> int:
    opened: list[Any] = []
    stages: list[_Stage] = []
    source: Any = None
    source_is_pipe = False
    try:
        for index, command in enumerate(commands):
            last = index == len(commands) - 1
            stage = _Stage()
            stages.append(stage)
            next_source: Any = None
            try:
                streams = open_redirections(command.redirections)
            except RedirectionError as exc:
                err.write(str(exc))
                stage.status = 1
                streams = None
            if streams is not None:
                opened.append(streams)
                for message in streams.errors:
                    err.write(message)
                stdin = streams.stdin if streams.stdin is not None else source
                if streams.stdout is not None:
                    target = streams.stdout
                else:
                    target = out if last else None
                name = command.name()
                if name is not None and is_builtin(name):
                    text, stage.status = _run_builtin_stage(command, state, err)
                    if target is None:
                        next_source = _spool(text, opened)
                    else:
                        target.write(text)
                        _flush(target)
                elif name is not None:
                    if target is None:
                        stdout_arg, captured = subprocess.PIPE, False
                    else:
                        stdout_arg, captured = _stdout_argument(target)
                    try:
                        process = _start(command.argv, state, stdin, stdout_arg, err)
                    except _LaunchError as exc:
                        stage.status = exc.status
                    else:
                        stage.process = process
                        stage.captured = captured
                        stage.target = target
                        if target is None:
                            next_source = process.stdout
                        if streams.stdout is not None and not last:
                            next_source = None
                if streams.stdout is not None or name is None:
                    next_source = None
            if source_is_pipe and source is not None:
                source.close()
            source_is_pipe = next_source is not None and stage.process is not None and (
                next_source is stage.process.stdout
            )
            if next_source is None and not last:
                next_source = _spool("", opened)
            source = next_source
        for stage in reversed(stages):
            if stage.process is None:
                continue
            if stage.captured:
                output, _ = stage.process.communicate()
                _write_output(stage.target, output)
            else:
                stage.process.wait()
            stage.status = status_from_returncode(stage.process.returncode)
    finally:
        if source_is_pipe and source is not None:
            source.close()
        for handle in opened:
            handle.close()
    state.status = stages[-1].status if stages else state.status
    return state.status


def execute(
    commands: Sequence[Command],
    tokens: Sequence[Token],
    state: ShellState,
    out: TextIO,
    err: TextIO,
) -> int:
    """Run the commands of one input line and return the resulting status.

    Without pipes a builtin runs in the shell itself; in a pipeline every
    stage runs apart from the shell and the last stage's status is kept.
    """
    if state.status == 127:
        state.status = 0
    if not commands:
        return state.status
    if count_pipes(tokens) == 0:
        return _execute_single(commands[0], state, out, err)
    return _execute_pipeline(commands, state, out, err)