"""Here-document input: reading the body and storing it in a file."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

HEREDOC_PREFIX = ".herdooc"
PROMPT = "> "
DEFAULT_DIRECTORY = "/tmp"


def heredoc_delimiter(text: str) -> str:
    """Return the delimiter word with surrounding spaces removed."""
    return text.strip(" ")


def read_heredoc(delimiter: str, read_line: Callable[[str], str | None]) -> str:
    """Read lines until one equals delimiter or read_line returns None.

    Each collected line is terminated by a newline.
    """
    lines = []
    while True:
        line = read_line(PROMPT)
        if line is None or line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)


def unique_file_name(name: str, directory: str | os.PathLike = DEFAULT_DIRECTORY) -> Path:
    """Return a path in directory for name, suffixing ``_a`` until it is unused."""
    base = Path(directory)
    while (base / name).exists():
        name += "_a"
    return base / name


def write_heredoc(
    delimiter: str,
    read_line: Callable[[str], str | None],
    directory: str | os.PathLike = DEFAULT_DIRECTORY,
    counter: int = 2,
) -> Path:
    """Read a here-document and write it to a fresh file; return its path."""
    body = read_heredoc(heredoc_delimiter(delimiter), read_line)
    path = unique_file_name(f"{HEREDOC_PREFIX}{counter}", directory)
    fd = os.open(path, os.O_CREAT | os.O_RDWR | os.O_TRUNC, 0o644)
    with os.fdopen(fd, "w") as handle:
        handle.write(body)
    return path