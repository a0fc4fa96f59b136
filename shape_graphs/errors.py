class ShapeInferenceError(Exception):
    """Base class for shape inference failures."""


class ArityError(ShapeInferenceError, ValueError):
    """Raised when an operator or graph receives the wrong number of values."""


class ShapeError(ShapeInferenceError, ValueError):
    """Raised on incompatible ranks, mismatched extents or bad dimensions."""


class UnsupportedInputError(ShapeInferenceError, TypeError):
    """Raised when an example input or a record has no shape rule."""


class UnsupportedOperatorError(ShapeInferenceError, NotImplementedError):
    """Raised when no shape handler is registered for an operator kind."""

    def __init__(self, kind: str):
        super().__init__(f"Node's operator {kind} is not supported")
        self.kind = kind


class GraphLogicError(ShapeInferenceError, RuntimeError):
    """
    Raised when the graph itself is malformed: an input consumed before it is
    produced, a value produced twice, or a subgraph on a non-fusion node.
    """
