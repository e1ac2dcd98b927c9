"""Graph primitives and helpers.

This package provides the undirected multigraph type `StrictMultiGraph` and
helper modules for NetworkX conversion (`convert`) and topology
serialization (`io`).
"""

from secroute.graph.strict_multigraph import EdgeID, NodeID, StrictMultiGraph

__all__ = ["EdgeID", "NodeID", "StrictMultiGraph"]
