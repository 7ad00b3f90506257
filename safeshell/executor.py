"""Starting commands: foreground, background, pipes and resource-limited runs."""

from __future__ import annotations

import contextlib
import errno
import io
import os
import subprocess
import sys
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, TextIO

from safeshell.limits import LimitError, LimitSpec, apply_limits
from safeshell.stats import ProcessOutcome, check_process_status

MAX_BACKGROUND_JOBS = 100
TEE_NAMES = ("my_tee", "tee_my")
STDERR_REDIRECT = "2>"


@dataclass
class BackgroundJob:
    """A command started in the background and not yet reported."""

    pid: int
    started: float
    command: str
    process: Optional[subprocess.Popen] = None

    def returncode(self) -> Optional[int]:
        """The exit status once finished, None while still running."""
        if self.process is None:
            return 1
        return self.process.poll()


def extract_stderr_redirect(args: Sequence[str]) -> tuple[list[str], Optional[str]]:
    """Remove the first "2> FILE" pair from args and return the file name."""
    words = list(args)
    for index, word in enumerate(words):
        if word == STDERR_REDIRECT and index + 1 < len(words):
            target = words[index + 1]
            del words[index : index + 2]
            return words, target
    return words, None


def strip_background(args: Sequence[str]) -> tuple[list[str], bool]:
    """Remove a trailing '&' from the last argument; report whether it was there."""
    if not args or not args[-1].endswith("&"):
        return list(args), False
    rest = list(args[:-1])
    last = args[-1][:-1]
    if last:
        rest.append(last)
    return rest, True


def tee(
    stream: Iterable[str],
    paths: Sequence[str],
    append: bool = False,
    out: Optional[TextIO] = None,
) -> None:
    """Copy lines from stream to out and to every file in paths."""
    out = out if out is not None else sys.stdout
    mode = "a" if append else "w"
    with contextlib.ExitStack() as stack:
        files: Optional[list[TextIO]] = None
        for line in stream:
            out.write(line)
            if files is None:
                files = []
                for path in paths:
                    try:
                        files.append(stack.enter_context(open(path, mode)))
                    except OSError:
                        print(f"Error opening file: {path}", file=sys.stderr)
            for handle in files:
                handle.write(line)
    out.flush()


def _limits_preexec(specs: Sequence[LimitSpec]) -> Callable[[], None]:
    def setup() -> None:
        try:
            apply_limits(specs)
        except LimitError as error:
            os.write(2, f"{error}\n".encode())
            os._exit(1)

    return setup


class Runner:
    """Starts child processes and reports how they ended."""

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.jobs: list[BackgroundJob] = []

    def _launch(
        self,
        args: Sequence[str],
        *,
        stdin=None,
        stdout=None,
        redirect: bool = True,
        preexec_fn: Optional[Callable[[], None]] = None,
    ) -> Optional[subprocess.Popen]:
        target = None
        if redirect:
            args, target = extract_stderr_redirect(args)
        error_file = None
        if target is not None:
            try:
                error_file = open(target, "ab")
            except OSError as error:
                print(f"open: {error.strerror}", file=sys.stderr)
                return None
        try:
            if not args:
                raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT))
            return subprocess.Popen(
                list(args),
                stdin=stdin,
                stdout=stdout,
                stderr=error_file,
                preexec_fn=preexec_fn,
            )
        except OSError as error:
            print(f"execvp: {error.strerror}", file=sys.stderr)
            return None
        finally:
            if error_file is not None:
                error_file.close()

    def _finish(self, code: int, pid: int, command: str, runtime: float) -> Optional[float]:
        outcome: ProcessOutcome = check_process_status(code, pid, command)
        if outcome.message:
            print(outcome.message, file=self.out)
            self.out.flush()
        return runtime if outcome.success else None

    def run(self, args: Sequence[str], line: str) -> Optional[float]:
        """Run a command; return its runtime on success (0.0 when backgrounded)."""
        args, background = strip_background(args)
        started = time.perf_counter()
        process = self._launch(args)
        pid = process.pid if process is not None else 0
        if background:
            if len(self.jobs) < MAX_BACKGROUND_JOBS:
                self.jobs.append(BackgroundJob(pid, started, line, process))
            return 0.0
        code = process.wait() if process is not None else 1
        return self._finish(code, pid, line, time.perf_counter() - started)

    def _run_tee(self, producer: Optional[subprocess.Popen], right: Sequence[str]) -> int:
        if len(right) < 2:
            print("ERR: my_tee requires at least one output file", file=sys.stderr)
            if producer is not None:
                producer.stdout.close()
            return 1
        append = right[1] == "-a"
        paths = right[2:] if append else right[1:]
        if producer is not None:
            with io.TextIOWrapper(producer.stdout) as stream:
                tee(stream, paths, append, self.out)
        return 0

    def run_pipe(self, left: Sequence[str], right: Sequence[str]) -> Optional[float]:
        """Run left with its output fed to right; return the total runtime on success."""
        label = " ".join(right)
        started = time.perf_counter()
        producer = self._launch(left, stdout=subprocess.PIPE, redirect=False)
        pid = 0
        if right[0] in TEE_NAMES:
            code = self._run_tee(producer, right)
        else:
            consumer = self._launch(
                right,
                stdin=producer.stdout if producer is not None else subprocess.DEVNULL,
            )
            if producer is not None:
                producer.stdout.close()
            if consumer is not None:
                pid = consumer.pid
                code = consumer.wait()
            else:
                code = 1
        if producer is not None:
            producer.wait()
        return self._finish(code, pid, label, time.perf_counter() - started)

    def run_limited(self, specs: Sequence[LimitSpec], args: Sequence[str]) -> Optional[float]:
        """Run a command with the given resource limits applied to it alone."""
        label = args[0] if args else ""
        started = time.perf_counter()
        process = self._launch(args, preexec_fn=_limits_preexec(list(specs)))
        pid = process.pid if process is not None else 0
        code = process.wait() if process is not None else 1
        return self._finish(code, pid, label, time.perf_counter() - started)

    def poll_background(self) -> list[tuple[BackgroundJob, ProcessOutcome, float]]:
        """Collect finished background jobs with their outcome and runtime."""
        now = time.perf_counter()
        finished = []
        running = []
        for job in self.jobs:
            code = job.returncode()
            if code is None:
                running.append(job)
                continue
            outcome = check_process_status(code, job.pid, job.command, background=True)
            finished.append((job, outcome, now - job.started))
        self.jobs = running
        return finished