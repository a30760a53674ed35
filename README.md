# minish

A small interactive shell. It reads a line, splits it into tokens, checks the
syntax, expands variables and runs the result: one command, or a whole
pipeline.

## Installing

    pip install .

## Running

    minish

The shell takes no arguments; given any, it prints
`the prog works without args` and exits. It shows the prompt `minishell> `
and reads commands until you type `exit` or press Ctrl-D (which prints
`exit`). Ctrl-C at the prompt starts a fresh line.

## What it understands

- Words, with single quotes (taken literally) and double quotes (with `$`
  expansion inside). An unclosed quote is reported as
  `minishell: Missing quote`.
- Variables: `$NAME`, `$?` for the last exit status, `$0` for the shell's
  name (`minishell`), and `~` on its own for the `HOME` directory.
  Unknown variables expand to nothing.
- Pipelines joined with `|`.
- Redirections: `<` from a file, `>` to a file, `>>` appended to a file,
  and `<< DELIM` for a here-document read (at the prompt `> `) up to the
  line `DELIM`. Here-document bodies are kept in a file under `/tmp` until
  the command reads them.
- Built-in commands: `echo` (with `-n`), `cd` (including `cd -` and
  `cd ~`, keeping `PWD` and `OLDPWD` up to date), `pwd`, `export`
  (including `NAME+=value`, and a `declare -x` listing with no arguments),
  `unset`, `env` and `exit [code]`.

Other commands are looked up on `PATH` and run as child programs. A
program that is not found gives status 127, one that may not be run gives
126, and a program killed by a signal gives 128 plus the signal number.
In a pipeline, built-ins run apart from the shell, so `cd` or `export`
there does not change the session; the status is that of the last stage.

A syntax error, such as a pipe at the start or end, two pipes in a row, or
a redirection with no file name, prints a message and leaves the shell
waiting for the next line.

## What it does not do

- It only runs interactively: there is no way to run a script file or a
  command given on the command line.
- There are no `;`, `&&`, `||` or `&` operators, no subshells, no
  wildcard expansion and no job control.
- Line editing and history come from Python's `readline` module where it
  is available; history is not saved between sessions.

## Using it from Python

`minish.shell.Shell` holds one session. `Shell.run_line(line)` runs a
single line and returns the resulting status; `Shell.loop(read_line)`
reads lines from any callable that takes a prompt and returns a string, or
`None` at end of input, and returns the exit code. The constructor accepts
a `ShellState`, output and error streams, a line reader and the directory
for here-document files.

The pieces also work on their own:

- `minish.lexer.tokenize(line)` returns a list of `Token`s and raises
  `LexerError` on an unclosed quote.
- `minish.syntax.validate(tokens)` raises `ShellSyntaxError` on a bad line.
- `minish.expand.expand_tokens(tokens, env, status, home)` expands
  variables, `$?` and `~`.
- `minish.parser.parse(tokens)` returns the `Command`s of a pipeline.
- `minish.executor.execute(commands, tokens, state, out, err)` runs them.
- `minish.environment.from_environ()` builds an `Environment` from the
  process environment.