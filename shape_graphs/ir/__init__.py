from .dtypes import DType, ValueType
from .meta import IntValuesMeta, TensorListMeta, TensorMeta, VariableMeta
from .graph import ElemType, Graph, GraphBuilder, Node, Value

__all__ = [
    "DType",
    "ValueType",
    "VariableMeta",
    "TensorMeta",
    "TensorListMeta",
    "IntValuesMeta",
    "Graph",
    "GraphBuilder",
    "Node",
    "Value",
    "ElemType",
]
