"""Parsing and validation of shell input lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

MAX_ARGS = 7
RLIMIT_EXTRA_ARGS = 6
MAX_DANGEROUS = 1000

BYTES_IN_KB = 1024
BYTES_IN_MB = 1024 * 1024
BYTES_IN_GB = 1024 * 1024 * 1024

_UNITS = {
    "B": 1,
    "K": BYTES_IN_KB,
    "KB": BYTES_IN_KB,
    "M": BYTES_IN_MB,
    "MB": BYTES_IN_MB,
    "G": BYTES_IN_GB,
    "GB": BYTES_IN_GB,
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class InputError(ValueError):
    """Raised when an input line is malformed; carries the messages to print."""

    def __init__(self, messages: Iterable[str]):
        self.messages = tuple(messages)
        super().__init__("\n".join(self.messages))


class DangerLevel(Enum):
    NONE = 0
    BLOCKED = 1
    WARNING = 2


@dataclass(frozen=True)
class DangerCheck:
    """Result of comparing a line against the dangerous-command list."""

    level: DangerLevel
    match: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        if self.level is DangerLevel.BLOCKED:
            return f'ERR: Dangerous command detected ("{self.match}"). Execution prevented.'
        if self.level is DangerLevel.WARNING:
            return (
                f'WARNING: Command similar to dangerous command ("{self.match}"). '
                "Proceed with caution."
            )
        return None


def has_double_space(text: str) -> bool:
    """Return True if the text holds two consecutive spaces."""
    return "  " in text


def _words(text: str) -> list[str]:
    return [word for word in text.split(" ") if word]


def split_words(text: str, max_args: int) -> list[str]:
    """Split text on spaces, raising InputError if there are more than max_args words."""
    words = _words(text)
    if len(words) > max_args:
        raise InputError(["ERR_ARGS"])
    return words


def split_and_validate(text: str, rlimit: bool = False) -> list[str]:
    """Validate spacing and argument count, returning the words of the line."""
    max_args = MAX_ARGS + RLIMIT_EXTRA_ARGS if rlimit else MAX_ARGS
    messages = []
    if has_double_space(text):
        messages.append("ERR_SPACE")
    words = _words(text)
    if len(words) > max_args:
        messages.append("ERR_ARGS")
    if messages:
        raise InputError(messages)
    return words


def parse_size(value: str) -> int:
    """Parse a number with an optional B/K/KB/M/MB/G/GB suffix into bytes."""
    match = _LEADING_INT.match(value)
    number = int(match.group(1)) if match else 0
    digits = len(value) - len(value.lstrip("0123456789"))
    unit = value[digits:]
    if not unit:
        return number
    return number * _UNITS.get(unit, 1)


def load_dangerous_commands(lines: Iterable[str]) -> list[str]:
    """Read dangerous commands, trimming trailing blanks and skipping empty lines."""
    commands: list[str] = []
    for raw in lines:
        line = raw.split("\n", 1)[0].rstrip(" \r")
        if not line:
            continue
        commands.append(line)
        if len(commands) >= MAX_DANGEROUS:
            break
    return commands


def check_dangerous(line: str, command_name: str, dangerous: Sequence[str]) -> DangerCheck:
    """Block exact matches; warn when an entry starts with the same command name."""
    warning: Optional[str] = None
    for entry in dangerous:
        if entry == line:
            return DangerCheck(DangerLevel.BLOCKED, entry)
        first = next(iter(_words(entry)), None)
        if first is not None and first == command_name:
            warning = entry
    if warning is not None:
        return DangerCheck(DangerLevel.WARNING, warning)
    return DangerCheck(DangerLevel.NONE)


def find_pipe(text: str) -> Optional[int]:
    """Return the index of the first '|' with a space on each side, or None."""
    for index, char in enumerate(text):
        if (
            char == "|"
            and 0 < index < len(text) - 1
            and text[index - 1] == " "
            and text[index + 1] == " "
        ):
            return index
    return None