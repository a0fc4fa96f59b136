import numpy as np
import pytest

from shape_graphs.errors import UnsupportedInputError
from shape_graphs.ir.dtypes import ValueType
from shape_graphs.ops.shapes import prim_constant


@pytest.mark.parametrize(
    "value, value_type, expected",
    [
        (0.5, ValueType.FLOAT, (1,)),
        (7, ValueType.INT, (7,)),
        (-1, ValueType.INT, (-1,)),
        (True, ValueType.BOOL, (1,)),
        (False, ValueType.BOOL, (0,)),
        ([1, 2, 3], ValueType.LIST, (1, 2, 3)),
        (None, ValueType.NONE, ()),
        ("mean", ValueType.STR, ()),
    ],
)
def test_scalar_constants(value, value_type, expected):
    assert prim_constant(value, value_type) == expected


def test_tensor_constant_uses_literal_shape():
    assert prim_constant(np.ones((2, 5), dtype=np.float16), ValueType.TENSOR) == (2, 5)


def test_unsupported_constant_type():
    with pytest.raises(UnsupportedInputError):
        prim_constant(None, ValueType.OPTIONAL)


def test_bool_list_constant():
    assert prim_constant([True, False], ValueType.LIST) == (1, 0)


@pytest.mark.parametrize("value", [[0.5, 1.5], [1, 2.0], ["a", "b"]])
def test_non_integer_list_constant_is_rejected(value):
    with pytest.raises(UnsupportedInputError, match="only int and bool lists"):
        prim_constant(value, ValueType.LIST)
