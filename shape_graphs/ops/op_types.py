class OpType:
    # --- Primitives ---
    CONSTANT = "prim::Constant"
    LIST_CONSTRUCT = "prim::ListConstruct"
    LIST_UNPACK = "prim::ListUnpack"
    CONSTANT_CHUNK = "prim::ConstantChunk"
    FUSED_CONCAT = "prim::FusedConcat"

    # --- Elementwise ---
    TANH = "aten::tanh"
    RELU = "aten::relu"
    SIGMOID = "aten::sigmoid"
    ADD = "aten::add"
    SUB = "aten::sub"
    MUL = "aten::mul"
    POW = "aten::pow"

    # --- Linear Algebra ---
    MM = "aten::mm"
    BMM = "aten::bmm"
    ADDMM = "aten::addmm"

    # --- Manipulation ---
    T = "aten::t"
    TRANSPOSE = "aten::transpose"
    FLATTEN = "aten::flatten"
    RESHAPE = "aten::reshape"
    PERMUTE = "aten::permute"
    SLICE = "aten::slice"
    CAT = "aten::cat"
    STACK = "aten::stack"
    CHUNK = "aten::chunk"

    # --- Embedding ---
    EMBEDDING_BAG = "aten::embedding_bag"
    FB_EMBEDDING_BAG_BYTE_ROWWISE_OFFSETS = "fb::embedding_bag_byte_rowwise_offsets"
    EMBEDDING_BAG_BYTE_ROWWISE_OFFSETS = (
        "quantized::embedding_bag_byte_rowwise_offsets"
    )
    EMBEDDING_BAG_4BIT_ROWWISE_OFFSETS = (
        "quantized::embedding_bag_4bit_rowwise_offsets"
    )

    # --- Glow ---
    FUSED_STACK = "glow::fused_stack"

    @classmethod
    def all(cls):
        """Returns every operator kind declared on this class."""
        return [
            v
            for k, v in cls.__dict__.items()
            if not k.startswith("_") and isinstance(v, str)
        ]
