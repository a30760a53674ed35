"""A small interactive shell: lexer, syntax checks, expansion, parser, builtins and executor."""

__version__ = "0.1.0"