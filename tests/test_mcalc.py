import pytest

from safeshell.mcalc import (
    Matrix,
    MatrixInputError,
    Operation,
    combine,
    format_matrix,
    mcalc,
    parse_matrix,
    parse_mcalc,
    reduce_matrices,
)


def test_parse_matrix_basic():
    m = parse_matrix('"(2,2:1,2,3,4)"')
    assert m == Matrix(2, 2, (1, 2, 3, 4))
    assert m.size == 4


def test_parse_matrix_negative_values():
    m = parse_matrix('"(1,3:-1,0,7)"')
    assert m.data == (-1, 0, 7)


@pytest.mark.parametrize(
    "arg",
    [
        "(2,2:1,2,3,4)",
        '"2,2:1,2,3,4"',
        '"(2,2)"',
        '"(22:1,2,3,4)"',
        '"(0,2:1,2)"',
        '"(2,-1:1,2)"',
        '"(2,2:1,2,3)"',
        '"(1,1:1,2)"',
        '"(1)"',
    ],
)
def test_parse_matrix_rejects(arg):
    with pytest.raises(MatrixInputError):
        parse_matrix(arg)


def test_operation_tokens():
    assert Operation.from_token('"ADD"') is Operation.ADD
    assert Operation.from_token('"SUB"') is Operation.SUB
    with pytest.raises(MatrixInputError):
        Operation.from_token("ADD")


def test_parse_mcalc_requires_two_matrices_and_op():
    with pytest.raises(MatrixInputError):
        parse_mcalc(['"(1,1:1)"', '"ADD"'])


def test_parse_mcalc_rejects_bad_operation():
    with pytest.raises(MatrixInputError):
        parse_mcalc(['"(1,1:1)"', '"(1,1:2)"', '"MUL"'])


def test_parse_mcalc_rejects_mismatched_dims():
    with pytest.raises(MatrixInputError):
        parse_mcalc(['"(1,2:1,2)"', '"(2,1:1,2)"', '"ADD"'])


def test_parse_mcalc_rejects_too_many_matrices():
    args = ['"(1,1:1)"'] * 6 + ['"ADD"']
    with pytest.raises(MatrixInputError):
        parse_mcalc(args)


def test_parse_mcalc_returns_matrices_and_op():
    matrices, op = parse_mcalc(['"(1,2:1,2)"', '"(1,2:3,4)"', '"SUB"'])
    assert op is Operation.SUB
    assert [m.data for m in matrices] == [(1, 2), (3, 4)]


def test_mcalc_add_worked_example():
    out = mcalc(['"(2,2:1,2,3,4)"', '"(2,2:5,6,7,8)"', '"ADD"'])
    assert out == "Output: (2,2:6,8,10,12)"


def test_mcalc_error_message():
    with pytest.raises(MatrixInputError, match="ERR_MAT_INPUT"):
        mcalc(['"(2,2:1,2,3,4)"', '"ADD"'])


def test_add_zero_is_identity():
    m = parse_matrix('"(2,3:4,-5,6,7,8,9)"')
    zero = Matrix(2, 3, (0,) * 6)
    assert combine(m, zero, Operation.ADD) == m
    assert combine(m, zero, Operation.SUB) == m


def test_sub_self_is_zero():
    m = parse_matrix('"(2,2:3,1,4,1)"')
    assert combine(m, m, Operation.SUB).data == (0, 0, 0, 0)


def test_combine_rejects_shape_mismatch():
    with pytest.raises(MatrixInputError):
        combine(Matrix(1, 2, (1, 2)), Matrix(2, 1, (1, 2)), Operation.ADD)


def test_reduce_add_matches_sequential_sum():
    ms = [Matrix(1, 2, (i, -i)) for i in range(1, 6)]
    result = reduce_matrices(ms, Operation.ADD)
    assert result.data == (sum(range(1, 6)), -sum(range(1, 6)))


def test_reduce_sub_is_pairwise_tree():
    a, b, c = (Matrix(1, 1, (v,)) for v in (10, 3, 2))
    result = reduce_matrices([a, b, c], Operation.SUB)
    expected = combine(combine(a, b, Operation.SUB), c, Operation.SUB)
    assert result == expected


def test_reduce_single_matrix_unchanged():
    m = Matrix(1, 1, (9,))
    assert reduce_matrices([m], Operation.ADD) == m


def test_reduce_empty_rejected():
    with pytest.raises(MatrixInputError):
        reduce_matrices([], Operation.ADD)


def test_format_round_trip():
    m = Matrix(3, 1, (-2, 0, 5))
    text = format_matrix(m)
    assert text.startswith("Output: (")
    assert parse_matrix('"' + text[len("Output: "):] + '"') == m