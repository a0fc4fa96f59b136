import pytest

from shape_graphs.errors import ArityError, ShapeError
from shape_graphs.ir.meta import IntValuesMeta, TensorMeta
from shape_graphs.ops.shapes import flatten, permute, reshape, t, transpose
from shape_graphs.ops.shapes.utils import prod, wrap_dim


def _int(v):
    return IntValuesMeta((v,))


def _ints(values):
    return IntValuesMeta(tuple(values), is_list=True)


def test_wrap_dim():
    assert wrap_dim(-1, 3) == 2
    assert wrap_dim(2, 3) == 2
    # 0-d tensors accept 0 and -1
    assert wrap_dim(-1, 0) == 0
    with pytest.raises(ShapeError, match="Dimension out of range"):
        wrap_dim(3, 3)
    with pytest.raises(ShapeError):
        wrap_dim(-4, 3)


# --- t / transpose ---


def test_t():
    assert t([TensorMeta((3, 4))]) == (4, 3)
    assert t([TensorMeta((5,))]) == (5,)
    assert t([TensorMeta(())]) == ()
    with pytest.raises(ShapeError):
        t([TensorMeta((2, 3, 4))])


def test_transpose():
    assert transpose([TensorMeta((2, 3, 4)), _int(0), _int(-1)]) == (4, 3, 2)


def test_transpose_twice_is_identity():
    shape = (2, 3, 4, 5)
    once = transpose([TensorMeta(shape), _int(1), _int(3)])
    twice = transpose([TensorMeta(once), _int(1), _int(3)])
    assert once == (2, 5, 4, 3)
    assert twice == shape


def test_transpose_out_of_range():
    with pytest.raises(ShapeError):
        transpose([TensorMeta((2, 3)), _int(0), _int(2)])


def test_transpose_arity():
    with pytest.raises(ArityError):
        transpose([TensorMeta((2, 3)), _int(0)])


# --- flatten ---


def test_flatten():
    assert flatten([TensorMeta((2, 3, 4)), _int(0), _int(-1)]) == (24,)
    assert flatten([TensorMeta((2, 3, 4, 5)), _int(1), _int(2)]) == (2, 12, 5)
    assert flatten([TensorMeta(()), _int(0), _int(-1)]) == (1,)


def test_flatten_start_after_end():
    with pytest.raises(ShapeError):
        flatten([TensorMeta((2, 3, 4)), _int(2), _int(1)])


# --- reshape ---


def test_reshape_infers_one_extent():
    out = reshape([TensorMeta((2, 3, 4)), _ints([4, -1])])
    assert out == (4, 6)
    assert prod(out) == 24


@pytest.mark.parametrize(
    "shape, target",
    [((2, 3, 4), [-1]), ((6, 4), [2, -1, 2]), ((10,), [5, 2]), ((1,), [-1, 1])],
)
def test_reshape_preserves_element_count(shape, target):
    out = reshape([TensorMeta(shape), _ints(target)])
    assert prod(out) == prod(shape)


def test_reshape_two_inferred_extents():
    with pytest.raises(ShapeError, match="only one dimension"):
        reshape([TensorMeta((2, 3, 4)), _ints([-1, -1])])


def test_reshape_indivisible():
    with pytest.raises(ShapeError):
        reshape([TensorMeta((2, 3, 4)), _ints([5, -1])])


def test_reshape_only_checks_divisibility():
    # 24 is divisible by 6, so (6, 2) is accepted even though it holds 12
    assert reshape([TensorMeta((2, 3, 4)), _ints([6, 2])]) == (6, 2)


def test_reshape_zero_extent():
    assert reshape([TensorMeta((0, 3)), _ints([3, 0])]) == (3, 0)
    with pytest.raises(ShapeError):
        reshape([TensorMeta((2, 3)), _ints([0, -1])])


# --- permute ---


def test_permute():
    assert permute([TensorMeta((2, 3, 4)), _ints([2, 0, 1])]) == (4, 2, 3)


@pytest.mark.parametrize("order", [[0, 1, 3], [0, -1, 1], [0, 1]])
def test_permute_invalid_order(order):
    with pytest.raises(ShapeError):
        permute([TensorMeta((2, 3, 4)), _ints(order)])
