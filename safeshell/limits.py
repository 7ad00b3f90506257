"""Resource limits for commands started with "rlimit set", and "rlimit show"."""

from __future__ import annotations

import resource
from dataclasses import dataclass
from typing import Iterable, Sequence

from safeshell.parsing import parse_size

RESOURCES = {
    "cpu": resource.RLIMIT_CPU,
    "mem": resource.RLIMIT_AS,
    "fsize": resource.RLIMIT_FSIZE,
    "nofile": resource.RLIMIT_NOFILE,
}


class LimitError(ValueError):
    """Raised when a limit request is invalid or cannot be applied."""


@dataclass(frozen=True)
class LimitSpec:
    """A named resource with its soft and hard limits."""

    name: str
    soft: int
    hard: int

    @property
    def resource(self) -> int:
        return RESOURCES[self.name]


def parse_limit(token: str) -> LimitSpec:
    """Parse "name=soft[:hard]" where values may carry a size suffix."""
    name, equals, value = token.partition("=")
    if not equals:
        raise LimitError("ERR")
    if name not in RESOURCES:
        raise LimitError("ERR: Not a valid resource")
    soft_text, colon, hard_text = value.partition(":")
    soft = parse_size(soft_text)
    hard = parse_size(hard_text) if colon else soft
    return LimitSpec(name, soft, hard)


def split_rlimit_set(args: Sequence[str]) -> tuple[list[LimitSpec], list[str]]:
    """Split the words after "rlimit set" into limits and the command to run."""
    if not args:
        raise LimitError("ERR")
    index = 0
    while index < len(args) and "=" in args[index]:
        index += 1
    if index >= len(args):
        raise LimitError("ERR")
    return [parse_limit(token) for token in args[:index]], list(args[index:])


def format_limit(label: str, soft: int, hard: int, unit: str = "") -> str:
    if soft == resource.RLIM_INFINITY:
        return f"{label}: soft=unlimited, hard=unlimited"
    return f"{label}: soft={soft}{unit}, hard={hard}{unit}"


def show_limits() -> list[str]:
    """Describe the current process limits, one line per resource."""
    rows = (
        ("CPU time", resource.RLIMIT_CPU, "s"),
        ("Memory", resource.RLIMIT_AS, ""),
        ("File size", resource.RLIMIT_FSIZE, ""),
        ("Open files", resource.RLIMIT_NOFILE, ""),
    )
    lines = []
    for label, code, unit in rows:
        soft, hard = resource.getrlimit(code)
        lines.append(format_limit(label, soft, hard, unit))
    return lines


def apply_limits(specs: Iterable[LimitSpec]) -> None:
    """Set each limit on the current process."""
    for spec in specs:
        try:
            resource.setrlimit(spec.resource, (spec.soft, spec.hard))
        except (OSError, ValueError) as error:
            raise LimitError(f"setrlimit: {error}") from error