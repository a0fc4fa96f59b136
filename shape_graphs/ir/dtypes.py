from enum import Enum
from typing import Any

import numpy as np


class DType(Enum):
    FP32 = "float32"
    FP16 = "float16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    BOOL = "bool"

    @classmethod
    def from_value(cls, value: Any) -> "DType":
        """
        Infers the element type of a numpy array, a torch tensor or a bare
        dtype object. Unknown element types fall back to FP32.
        """
        dt = str(getattr(value, "dtype", value))
        if "float16" in dt or "half" in dt:
            return cls.FP16
        if "float" in dt:
            return cls.FP32
        if "uint8" in dt:
            return cls.UINT8
        if "int64" in dt or "long" in dt:
            return cls.INT64
        if "int" in dt:
            return cls.INT32
        if "bool" in dt:
            return cls.BOOL
        return cls.FP32

    def to_numpy(self) -> Any:
        return {
            DType.FP32: np.float32,
            DType.FP16: np.float16,
            DType.INT32: np.int32,
            DType.INT64: np.int64,
            DType.UINT8: np.uint8,
            DType.BOOL: np.bool_,
        }[self]


class ValueType(Enum):
    """Declared type of a graph value, as it appears in a scripted graph."""

    TENSOR = "Tensor"
    FLOAT = "float"
    INT = "int"
    BOOL = "bool"
    STR = "str"
    NONE = "NoneType"
    LIST = "List"
    OPTIONAL = "Optional"

    def is_tensor_like(self) -> bool:
        return self == ValueType.TENSOR
