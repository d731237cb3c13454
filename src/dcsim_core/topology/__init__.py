"""
Topology extraction: terminals to electrical nodes, node numbering and ground choice.
"""
from .union_find import DisjointSet
from .results import GROUND_NODE_ID, ElectricalNode, TopologyResults
from .extractor import TopologyExtractor, number_nodes

__all__ = [
    "DisjointSet",
    "GROUND_NODE_ID",
    "ElectricalNode",
    "TopologyResults",
    "TopologyExtractor",
    "number_nodes",
]
