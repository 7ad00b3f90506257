"""Timing statistics and child process status reporting."""

from __future__ import annotations

import signal
from dataclasses import dataclass
from typing import Optional

_SIGNAL_TEXT = {
    "SIGSEGV": "Memory allocation failed!",
    "SIGINT": "terminated by signal: SIGINT",
    "SIGTERM": "terminated by signal: SIGTERM",
    "SIGKILL": "terminated by signal: SIGKILL",
    "SIGABRT": "terminated by signal: SIGABRT",
    "SIGFPE": "terminated by signal: SIGFPE",
    "SIGILL": "terminated by signal: SIGILL",
    "SIGPIPE": "terminated by signal: SIGPIPE",
    "SIGQUIT": "terminated by signal: SIGQUIT",
    "SIGTRAP": "terminated by signal: SIGTRAP",
    "SIGXCPU": "CPU time limit exceeded!",
    "SIGXFSZ": "File size limit exceeded!",
    "SIGUSR1": "Too many open files!",
}

_SIGNAL_MESSAGES = {
    int(getattr(signal, name)): text
    for name, text in _SIGNAL_TEXT.items()
    if hasattr(signal, name)
}


@dataclass
class TimingStats:
    """Running statistics over command runtimes, in seconds."""

    count: int = 0
    last: float = 0.0
    total: float = 0.0
    average: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0

    def _update_extremes(self, runtime: float) -> None:
        if runtime > self.maximum:
            self.maximum = runtime
        if runtime < self.minimum or self.minimum == 0:
            self.minimum = runtime

    def record(self, runtime: float) -> None:
        """Account for one finished command."""
        self.count += 1
        self.last = runtime
        self.total += runtime
        self.average = self.total / self.count
        self._update_extremes(runtime)

    def record_pipe(self, runtime: float) -> None:
        """Account for a two-command pipe, splitting its runtime evenly."""
        self.count += 2
        self.total += runtime
        per_command = runtime / 2
        self.last = per_command
        self.average = self.total / self.count
        self._update_extremes(per_command)

    def prompt(self, blocked: int) -> str:
        return (
            f"#cmd:{self.count}|#dangerous_cmd_blocked:{blocked}"
            f"|last_cmd_time:{self.last:.5f}|avg_time:{self.average:.5f}"
            f"|min_time:{self.minimum:.5f}|max_time:{self.maximum:.5f}>>"
        )


@dataclass(frozen=True)
class ProcessOutcome:
    """How a child process ended: success flag, text to print, text to log."""

    success: bool
    message: Optional[str] = None
    log_line: Optional[str] = None


def describe_signal(signum: int) -> str:
    """Return the text shown when a child is killed by the given signal."""
    return _SIGNAL_MESSAGES.get(int(signum), f"terminated by signal: {int(signum)}")


def check_process_status(
    returncode: int, pid: int, command: str, background: bool = False
) -> ProcessOutcome:
    """Interpret a return code (negative for a signal) as a ProcessOutcome."""
    if returncode == 0:
        return ProcessOutcome(True)
    if returncode > 0:
        if background:
            return ProcessOutcome(
                False,
                f"\nBackground process [{pid}] failed: {command} with exit code {returncode}",
                f"{command} : failed with exit code {returncode} (background)",
            )
        return ProcessOutcome(
            False, f"Error: Command '{command}' exited with code {returncode}"
        )
    signum = -returncode
    text = describe_signal(signum)
    if background:
        return ProcessOutcome(
            False,
            f"\nBackground process [{pid}] {text} - {command}",
            f"{command} : terminated by signal {signum} (background)",
        )
    return ProcessOutcome(False, text)