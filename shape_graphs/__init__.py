# Expose main components for easy access
from .ir.graph import Graph, GraphBuilder, Node, Value
from .ir.meta import IntValuesMeta, TensorListMeta, TensorMeta, VariableMeta
from .ops.op_types import OpType
from .engine import ShapeInferenceEngine
from .errors import (
    ArityError,
    GraphLogicError,
    ShapeError,
    ShapeInferenceError,
    UnsupportedInputError,
    UnsupportedOperatorError,
)
