"""Interactive shell that validates, times and runs commands."""

from __future__ import annotations

import errno
import sys
import time
from typing import Optional, Sequence, TextIO

from safeshell.executor import Runner
from safeshell.limits import LimitError, show_limits, split_rlimit_set
from safeshell.mcalc import ERROR_MESSAGE, MatrixInputError, mcalc
from safeshell.parsing import (
    DangerLevel,
    InputError,
    check_dangerous,
    find_pipe,
    load_dangerous_commands,
    split_and_validate,
)
from safeshell.stats import TimingStats


class Shell:
    """Reads lines, checks them against the dangerous list and runs them."""

    def __init__(self, dangerous: Sequence[str], log: TextIO, out: Optional[TextIO] = None):
        self.dangerous = list(dangerous)
        self.log = log
        self.out = out if out is not None else sys.stdout
        self.stats = TimingStats()
        self.blocked = 0
        self.runner = Runner(self.out)

    def _say(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.out)
        self.out.flush()

    def _record(self, runtime: float, name: str) -> None:
        self.stats.record(runtime)
        self.log.write(f"{name} : {runtime:.5f} sec\n")
        self.log.flush()

    def _check(self, line: str, name: str) -> bool:
        """Print any danger message; return True if the command is blocked."""
        result = check_dangerous(line, name, self.dangerous)
        if result.message:
            self._say(result.message)
        if result.level is DangerLevel.BLOCKED:
            self.blocked += 1
            return True
        return False

    def _report_background(self) -> None:
        for job, outcome, runtime in self.runner.poll_background():
            if outcome.message:
                self._say(outcome.message)
            if outcome.log_line:
                self.log.write(outcome.log_line + "\n")
                self.log.flush()
            if outcome.success:
                self._record(runtime, job.command)

    def _handle_pipe(self, line: str, index: int) -> None:
        texts = (line[: index - 1], line[index + 2 :])
        parts = []
        failed = False
        for text in texts:
            try:
                parts.append(split_and_validate(text))
            except InputError as error:
                self._say(*error.messages)
                failed = True
        if failed or not all(parts):
            return
        for text, words in zip(texts, parts):
            if self._check(text, words[0]):
                return
        runtime = self.runner.run_pipe(parts[0], parts[1])
        if runtime is not None:
            self.stats.record_pipe(runtime)

    def _handle_rlimit(self, words: list[str]) -> None:
        if len(words) < 2:
            return
        if words[1] == "show":
            if len(words) != 2:
                return
            started = time.perf_counter()
            self._say(*show_limits())
            self._record(time.perf_counter() - started, "rlimit show")
        elif words[1] == "set":
            if len(words) < 3:
                self._say("ERR")
                return
            try:
                specs, command = split_rlimit_set(words[2:])
            except LimitError as error:
                self._say(str(error))
                return
            check = check_dangerous(command[0], command[0], self.dangerous)
            if check.message:
                self._say(check.message)
            runtime = self.runner.run_limited(specs, command)
            if runtime is not None:
                self._record(runtime, command[0])

    def _handle_mcalc(self, args: list[str]) -> None:
        started = time.perf_counter()
        try:
            result = mcalc(args)
        except MatrixInputError:
            self._say(ERROR_MESSAGE)
            return
        self._say(result)
        self._record(time.perf_counter() - started, "mcalc")

    def handle_line(self, line: str) -> bool:
        """Process one input line; return False when the shell should stop."""
        line = line.split("\n", 1)[0]
        index = find_pipe(line)
        if index is not None:
            self._handle_pipe(line, index)
            return True
        try:
            words = split_and_validate(line, line.startswith("rlimit set"))
        except InputError as error:
            self._say(*error.messages)
            return True
        if not words:
            return True
        if line.startswith("rlimit"):
            self._handle_rlimit(words)
            return True
        if words[0] == "mcalc":
            self._handle_mcalc(words[1:])
            return True
        if words[0] == "done":
            self._say(str(self.blocked))
            return False
        if self._check(line, words[0]):
            return True
        runtime = self.runner.run(words, line)
        if runtime is not None:
            self._record(runtime, line)
        return True

    def run(self, stdin: TextIO) -> int:
        """Prompt, read and handle lines until EOF or "done"."""
        while True:
            self._report_background()
            print(self.stats.prompt(self.blocked), end="", file=self.out)
            self.out.flush()
            line = stdin.readline()
            if not line:
                return 0
            if not self.handle_line(line):
                return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("Error: please include two files", file=sys.stderr)
        return 1
    try:
        with open(args[0]) as source:
            dangerous = load_dangerous_commands(source)
        log = open(args[1], "a")
    except OSError as error:
        if error.errno == errno.EMFILE:
            print("Too many open files!")
        else:
            print("ERR", file=sys.stderr)
        return 1
    with log:
        return Shell(dangerous, log).run(sys.stdin)