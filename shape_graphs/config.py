DEBUG_EXECUTION = False
DEBUG_DETAILED = False

# Kind prefix of nodes that carry a fused subgraph (e.g. "glow::FusionGroup_0").
FUSION_NODE_SYMBOL = "glow::FusionGroup"

# Quantized embedding bags always receive offsets with a trailing end offset,
# so the number of bags is len(offsets) - 1.
HAS_END_OFFSET = True
