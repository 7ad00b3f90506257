"""Element-wise addition and subtraction of matrices given on the command line."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

MAX_MATRICES = 5
ERROR_MESSAGE = "ERR_MAT_INPUT"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_NUMBER_RUN = re.compile(r"[0-9-]+")
_DATA_SEPARATORS = re.compile(r"[,)]")


class MatrixInputError(ValueError):
    """Raised when mcalc input is malformed."""

    def __init__(self, detail: str = ERROR_MESSAGE):
        super().__init__(detail)


class Operation(Enum):
    ADD = "ADD"
    SUB = "SUB"

    @property
    def token(self) -> str:
        """The quoted form used on the command line."""
        return f'"{self.value}"'

    @classmethod
    def from_token(cls, token: str) -> "Operation":
        for op in cls:
            if op.token == token:
                return op
        raise MatrixInputError()

    def apply(self, a: int, b: int) -> int:
        return a + b if self is Operation.ADD else a - b


@dataclass(frozen=True)
class Matrix:
    """A matrix stored row by row."""

    rows: int
    cols: int
    data: tuple[int, ...]

    @property
    def size(self) -> int:
        return self.rows * self.cols


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_matrix(arg: str) -> Matrix:
    """Parse an argument of the form "(rows,cols:v1,v2,...)" including the quotes."""
    if len(arg) < 7 or not (arg.startswith('"(') and arg.endswith(')"')):
        raise MatrixInputError()
    inner = arg[2:-2]
    dims, colon, data = inner.partition(":")
    if not colon:
        raise MatrixInputError()
    rows_text, comma, cols_text = dims.partition(",")
    if not comma:
        raise MatrixInputError()
    rows, cols = _atoi(rows_text), _atoi(cols_text)
    if rows <= 0 or cols <= 0:
        raise MatrixInputError()
    size = rows * cols
    if len(_NUMBER_RUN.findall(data)) != size:
        raise MatrixInputError()
    values = [_atoi(token) for token in _DATA_SEPARATORS.split(data) if token][:size]
    values.extend([0] * (size - len(values)))
    return Matrix(rows, cols, tuple(values))


def parse_mcalc(args: Sequence[str]) -> tuple[list[Matrix], Operation]:
    """Parse the arguments after the command name: matrices followed by an operation."""
    if len(args) < 3:
        raise MatrixInputError()
    operation = Operation.from_token(args[-1])
    matrices: list[Matrix] = []
    for arg in args[:-1]:
        matrix = parse_matrix(arg)
        if matrices and (matrix.rows, matrix.cols) != (matrices[0].rows, matrices[0].cols):
            raise MatrixInputError()
        if len(matrices) >= MAX_MATRICES:
            raise MatrixInputError()
        matrices.append(matrix)
    return matrices, operation


def combine(left: Matrix, right: Matrix, op: Operation) -> Matrix:
    """Apply the operation element by element."""
    if (left.rows, left.cols) != (right.rows, right.cols):
        raise MatrixInputError()
    data = tuple(op.apply(a, b) for a, b in zip(left.data, right.data))
    return Matrix(left.rows, left.cols, data)


def reduce_matrices(matrices: Sequence[Matrix], op: Operation) -> Matrix:
    """Combine matrices pairwise, level by level, until one remains."""
    current = list(matrices)
    if not current:
        raise MatrixInputError()
    while len(current) > 1:
        pairs = zip(current[0::2], current[1::2])
        reduced = [combine(left, right, op) for left, right in pairs]
        if len(current) % 2 == 1:
            reduced.append(current[-1])
        current = reduced
    return current[0]


def format_matrix(matrix: Matrix) -> str:
    values = ",".join(str(value) for value in matrix.data)
    return f"Output: ({matrix.rows},{matrix.cols}:{values})"


def mcalc(args: Sequence[str]) -> str:
    """Run a full mcalc request and return the output line."""
    matrices, operation = parse_mcalc(args)
    return format_matrix(reduce_matrices(matrices, operation))