# safeshell

An interactive mini-shell for POSIX systems. It does the following:

- It refuses to run a line that exactly matches an entry in a file of dangerous commands.
- It warns when a command has the same name as one of those entries.
- It rejects input that contains two spaces in a row, or more than a command plus six arguments.
- It runs a single pipe `left | right`. The right-hand side can be the built-in `my_tee` (also spelled `tee_my`).
- It runs a command in the background when the line ends with `&`.
- It appends a command's standard error to a file with `2> file`.
- It runs a command under resource limits with `rlimit set`, and prints the current limits with `rlimit show`.
- It adds or subtracts matrices with the built-in `mcalc`.
- It keeps timing statistics and shows them in the prompt. It appends each successful run time to a log file.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Starting the shell

```
safeshell DANGEROUS_COMMANDS_FILE EXEC_TIMES_FILE
```

If either argument is missing, the shell prints `Error: please include two files` and exits with status 1. If a file cannot be opened, it prints `ERR` to standard error and exits with status 1.

`DANGEROUS_COMMANDS_FILE` holds one full command line per line, for example:

```
rm -rf /
dd if=/dev/zero of=/dev/sda
```

When reading this file:

- Trailing spaces and carriage returns are ignored.
- Blank lines are skipped.
- At most 1000 entries are read.

`EXEC_TIMES_FILE` is opened for appending. Every successful command adds a line of the form `command : 0.00123 sec`.

The prompt shows the statistics collected so far:

```
#cmd:0|#dangerous_cmd_blocked:0|last_cmd_time:0.00000|avg_time:0.00000|min_time:0.00000|max_time:0.00000>>
```

How the statistics are counted:

- A successful pipe counts as two commands. Its run time is split evenly between them.
- Background commands are reported just before the next prompt, once they have finished.

Type `done` to leave. The shell prints the number of blocked commands and exits; end of input also ends the shell.

## Input rules

| Input | Result |
| --- | --- |
| two spaces in a row | `ERR_SPACE` |
| more than a command and six arguments | `ERR_ARGS` |
| exact match of a dangerous command | `ERR: Dangerous command detected ("..."). Execution prevented.` |
| same command name as a dangerous command | `WARNING: Command similar to dangerous command ("..."). Proceed with caution.` |

A command that exits with a non-zero status is reported as `Error: Command '...' exited with code N`.

## Pipes and my_tee

A pipe needs a space on each side of `|`:

```
echo hello | my_tee out.txt
echo hello | my_tee -a log1.txt log2.txt
```

`my_tee` copies its input to standard output and to every file named. With `-a` it appends instead of overwriting.

## Resource limits

```
rlimit show
rlimit set cpu=2 mem=50M ./program arg
rlimit set fsize=1M:2M nofile=10 ./program
```

The resources are:

| Name | Limit |
| --- | --- |
| `cpu` | CPU time in seconds |
| `mem` | address space |
| `fsize` | file size |
| `nofile` | open files |

A value is written as `soft` or `soft:hard`. Values accept the units `B`, `K`/`KB`, `M`/`MB` and `G`/`GB`.

An `rlimit set` line may hold up to thirteen words. Errors are reported as follows:

- An unknown resource name prints `ERR: Not a valid resource`.
- A line with no command after the limits prints `ERR`.

If the limited program is killed by a signal, the shell prints a message for it:

| Signal | Message |
| --- | --- |
| `SIGXCPU` | `CPU time limit exceeded!` |
| `SIGXFSZ` | `File size limit exceeded!` |
| `SIGSEGV` | `Memory allocation failed!` |
| `SIGUSR1` | `Too many open files!` |
| any other signal | `terminated by signal: ...` |

## Matrix calculator

```
mcalc "(2,2:1,2,3,4)" "(2,2:5,6,7,8)" "ADD"
Output: (2,2:6,8,10,12)
```

Write each matrix as `"(rows,cols:values)"`, quotes included. All matrices must have the same shape. The last argument is `"ADD"` or `"SUB"`.

Up to five matrices are combined pairwise, level by level, until one remains. Malformed input prints `ERR_MAT_INPUT`.

## Pipeline validator

```
safeshell-validate
```

This runs a fixed set of pipelines through a separate command validator. For each one it prints one of:

- that every command passed;
- the first error found;
- a warning for a command whose name contains `rm`, `format`, `mkfs` or `dd`.

## Using it from Python

```python
from safeshell.mcalc import mcalc
from safeshell.parsing import parse_size, split_and_validate

parse_size("10M")                          # 10485760
split_and_validate("ls -l /tmp", False)    # ["ls", "-l", "/tmp"]
print(mcalc(['"(1,3:1,2,3)"', '"(1,3:3,2,1)"', '"SUB"']))   # Output: (1,3:-2,0,2)
```

## Modules

- `safeshell.parsing` covers line validation, size parsing and the dangerous-command checks.
- `safeshell.stats` holds `TimingStats`, the prompt and the reporting of how child processes ended.
- `safeshell.limits` parses limit specifications and shows or applies limits.
- `safeshell.mcalc` is the matrix calculator.
- `safeshell.executor` holds `Runner`, which starts foreground, background, piped and limited commands, and `tee`.
- `safeshell.shell` holds `Shell` and the `safeshell` command.
- `safeshell.validator` is the stand-alone pipeline validator.

## What it does not do

- It runs at most one pipe per line; further `|` characters are passed as arguments.
- It has no quoting, globbing, variables, input/output redirection other than `2>`, or job control beyond starting background commands.