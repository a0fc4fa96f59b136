from .op_types import OpType
