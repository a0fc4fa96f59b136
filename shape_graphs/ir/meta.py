from dataclasses import dataclass
from typing import List, Tuple

from .dtypes import DType
from ..errors import ShapeError

Shape = Tuple[int, ...]


class VariableMeta:
    """
    Resolved datum of one graph value. Exactly one of three variants:

    - TensorMeta: the value is a tensor with a concrete shape.
    - TensorListMeta: the value is a list of tensors.
    - IntValuesMeta: the value is a scalar int/bool or an int list whose
      contents are known statically.

    Every variant answers ``shape`` so shape-only consumers (e.g. a binary op
    whose second operand is a Python scalar) never need to special-case it.
    """

    @property
    def shape(self) -> Shape:
        raise NotImplementedError

    @property
    def shapes(self) -> List[Shape]:
        raise ShapeError(f"Expected a tensor list, got {self}")

    @property
    def values(self) -> Tuple[int, ...]:
        return ()


@dataclass(frozen=True)
class TensorMeta(VariableMeta):
    dims: Shape
    dtype: DType = DType.FP32

    @property
    def shape(self) -> Shape:
        return self.dims

    def __repr__(self):
        return f"Tensor[{self.dtype.value}]{list(self.dims)}"


@dataclass(frozen=True)
class TensorListMeta(VariableMeta):
    items: Tuple[Shape, ...]

    @property
    def shape(self) -> Shape:
        raise ShapeError(f"Expected a tensor, got a tensor list {self}")

    @property
    def shapes(self) -> List[Shape]:
        return list(self.items)

    def __repr__(self):
        return f"Tensor[]{[list(s) for s in self.items]}"


@dataclass(frozen=True)
class IntValuesMeta(VariableMeta):
    payload: Tuple[int, ...]
    is_list: bool = False

    @property
    def shape(self) -> Shape:
        # Placeholder shapes: a scalar looks like a 1-element tensor, an int
        # list like a column of its length.
        if self.is_list:
            return (len(self.payload), 1)
        return (1,)

    @property
    def values(self) -> Tuple[int, ...]:
        return self.payload

    @property
    def dtype(self) -> DType:
        return DType.INT64

    def __repr__(self):
        if self.is_list:
            return f"int[]{list(self.payload)}"
        return f"int{list(self.payload)}"


MetaStack = List[VariableMeta]


def make_shape(dims) -> Shape:
    return tuple(int(d) for d in dims)
