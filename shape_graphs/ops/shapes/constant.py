from typing import Any, Tuple

import numpy as np

from ...errors import UnsupportedInputError
from ...ir.dtypes import ValueType


def prim_constant(value: Any, value_type: ValueType) -> Tuple[int, ...]:
    """
    prim::Constant may produce any of

        int = prim::Constant[value=0]()
        float = prim::Constant[value=0.5]()
        bool = prim::Constant[value=0]()
        int[] = prim::Constant[value=[1, 2]]()
        None = prim::Constant()
        Tensor = prim::Constant[value=<Tensor>]()

    For a tensor the literal's shape is returned, otherwise the value itself.
    A float never affects a shape, so it reads as 1.
    """
    if value_type == ValueType.FLOAT:
        return (1,)
    if value_type in (ValueType.INT, ValueType.BOOL):
        return (int(value),)
    if value_type == ValueType.LIST:
        # Only int[] and bool[] constants carry shape information
        for v in value:
            if not isinstance(v, (int, bool, np.integer, np.bool_)):
                raise UnsupportedInputError(
                    f"prim::Constant: only int and bool lists are supported, got {value}"
                )
        return tuple(int(v) for v in value)
    if value_type in (ValueType.NONE, ValueType.STR):
        return ()
    if value_type == ValueType.TENSOR:
        return tuple(int(s) for s in value.shape)
    raise UnsupportedInputError(
        f"prim::Constant: unsupported constant type {value_type.value}"
    )
