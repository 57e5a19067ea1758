# minishellpy

The building blocks of a small POSIX-style command shell, as a Python
library: a lexer and tokenizer for command lines, variable expansion with
quote removal, the usual builtins, redirections with here-documents, and an
executor that runs single commands and pipelines. It needs a POSIX system;
pipelines are run with `os.fork`.

It has no runtime dependencies. Tests use `pytest` and come with the `test`
extra.

## What it supports

- Quoting with `'single'` and `"double"` quotes. Variables expand inside
  double quotes but not inside single quotes, and the quotes are removed.
- `$NAME` and `$?` expansion. A `$` not followed by a name stays as it is.
  Arguments that expand to nothing are dropped.
- Pipelines of several commands, each run in its own process.
- Redirections: `<`, `>`, `>>` and here-documents with `<<`. A quoted
  here-document delimiter turns off expansion in its body. When a command
  has several here-documents, all are read and only the last body is fed
  to standard input.
- Builtins: `echo` (with `-n`, `-nn`, ...), `cd`, `pwd`, `export`, `unset`,
  `env` and `exit`.
- A command is looked up in the current directory and then on `PATH`,
  unless it starts with `/`, `./` or `../`.
- Exit status `127` for a command that is not found and `126` for a path
  that exists but cannot be run.

## The stages

### Lexing and tokenizing

`minishellpy.lexer.lexer_analyze` puts spaces around `|`, `<`, `>`, `<<`
and `>>` outside quotes. `minishellpy.tokenizer.tokenize` then splits the
line into `Token` objects; quotes stay inside their word.

```python
from minishellpy.lexer import lexer_analyze
from minishellpy.tokenizer import tokenize

line = lexer_analyze("echo hi|cat")
print(line)              # echo hi | cat
tokens = tokenize(line)  # WORD "echo", WORD "hi", PIPE "|", WORD "cat"
```

### Commands

`minishellpy.tokens` defines `TokenType`, `Token`, `Redirection` and
`Command`. A `Command` holds its arguments and its redirections in order;
`Command.add_redirection(kind, target)` appends one.
`attach_redirection(tokens, index, command)` adds the redirection at
`tokens[index]` to a command when a word follows it, and returns the index
of the last token it used.

### The environment and the shell state

`minishellpy.environment.Environment` keeps variables in order. Variables
loaded with `from_strings` keep their order; a variable set for the first
time goes to the front.

```python
from minishellpy.environment import Environment

env = Environment.from_strings(["HOME=/home/user", "PATH=/usr/bin:/bin"])
env.set("GREETING", "hello")
print(env.get("HOME"))    # /home/user
print("GREETING" in env)  # True
print(env.to_list())      # ['GREETING=hello', 'HOME=/home/user', 'PATH=/usr/bin:/bin']
```

`minishellpy.shell.Shell` holds an `Environment`, the `env_array` of
`KEY=VALUE` strings given to child processes, the last `exit_status`, and
whether the shell is `interactive`. `Shell.from_environ(environ, interactive)`
builds one from a mapping or from `KEY=VALUE` strings; by default it uses the
process environment and checks whether standard input is a terminal.

### Expansion

```python
from minishellpy.expander import expand_env_vars
from minishellpy.shell import Shell

shell = Shell.from_environ(["HOME=/home/user"], False)
print(expand_env_vars("'$HOME' is \"$HOME\"", shell))  # $HOME is /home/user
```

`expand_variables(commands, shell)` expands the arguments and the
redirection targets of every command; here-document delimiters are left as
written.

### Running commands

```python
from minishellpy.executor import execute_commands
from minishellpy.shell import Shell
from minishellpy.tokens import Command, TokenType

shell = Shell.from_environ()
command = Command(args=["echo", "hello"])
command.add_redirection(TokenType.REDIR_OUT, "out.txt")
status = execute_commands([command], shell)
```

One command runs directly: builtins and commands without arguments run in
the shell itself, so `cd` and `export` last. Several commands run as a
pipeline through `execute_pipeline`, which returns the status of the last
command.

`minishellpy.builtins.execute_builtin(args, shell)` runs a single builtin
and `is_builtin(name)` tells whether a name is one. The `exit` builtin
prints `exit` and raises `ShellExit`, whose `status` is the exit status;
with a non-numeric argument or too many arguments an interactive shell
reports the error and returns a status instead.

`minishellpy.pathsearch.find_executable(cmd, shell)` returns the path a
command name would run, or `None`.

### Redirections

`minishellpy.redirections.setup_redirections(redirections, read_line)`
points descriptors 0 and 1 at the targets. It raises `RedirectionError`
when a file cannot be opened and `HeredocInterrupted` when here-document
input ends or is interrupted before its delimiter. `save_std_streams()` and
`restore_redirections(stdin_copy, stdout_copy)` save and restore the
standard descriptors. `collect_heredocs(redirections, read_line, shell)`
reads here-documents through any `read_line(prompt)` callable that returns
`None` at end of input.

### Prompt and signals

`minishellpy.prompt.display_prompt(read_line)` shows the coloured
`minishell$>` prompt (`build_prompt()`) and returns the line, or `None` at
end of input. `add_to_history(line)` records non-empty lines in the
`readline` history when that module is available.

`minishellpy.signals.setup_signals()` makes Ctrl-C print a new line and
ignores Ctrl-\; `setup_heredoc_signals()` makes Ctrl-C abort here-document
input; `reset_signals()` restores the defaults. `sigint_received()` and
`clear_sigint()` read and clear the interrupt flag.

## Errors

Errors go to standard error in the form

```
minishell: <command>: <argument>: <message>
```

built by `minishellpy.errors.format_error`, and set the exit status that
the next `$?` expands to.

## What it does not do

- There is no command to start an interactive shell and no read-eval loop;
  the package provides the pieces such a loop is made of.
- There is no function that turns a token list into `Command` objects.
  Build commands yourself, splitting on `PIPE` tokens and using
  `attach_redirection` for redirection tokens.
- Syntax errors such as a trailing `|` or a redirection without a target
  are not detected.