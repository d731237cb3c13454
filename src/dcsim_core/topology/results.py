# src/dcsim_core/topology/results.py
"""
Result contracts of the topology extraction. All objects are frozen and rebuilt on
every solve; nothing here is persisted.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..data_structures import Connection
from ..diagnostics.issues import DiagnosticIssue

logger = logging.getLogger(__name__)

GROUND_NODE_ID = 0


@dataclass(frozen=True)
class ElectricalNode:
    """An equivalence class of terminals at the same potential. Node 0 is ground."""
    node_id: int
    terminal_ids: Tuple[str, ...]

    @property
    def is_ground(self) -> bool:
        return self.node_id == GROUND_NODE_ID

    def __len__(self) -> int:
        return len(self.terminal_ids)


@dataclass(frozen=True)
class TopologyResults:
    """
    The formal result of topology extraction and node numbering for one snapshot.

    `nodes` is ordered by node id. `terminal_node_map` covers every terminal of every
    element in the snapshot.
    """
    nodes: Tuple[ElectricalNode, ...]
    terminal_node_map: Dict[str, int]
    dangling_connections: Tuple[Connection, ...] = ()
    floating_node_ids: Tuple[int, ...] = ()
    issues: Tuple[DiagnosticIssue, ...] = ()

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_non_ground_nodes(self) -> int:
        return max(len(self.nodes) - 1, 0)

    @property
    def ground(self) -> Optional[ElectricalNode]:
        return self.nodes[GROUND_NODE_ID] if self.nodes else None

    def node_of(self, terminal_id: str) -> int:
        """
        Returns the node id of `terminal_id`. A terminal outside the topology resolves to
        ground; callers that need to report this use `lookup` instead.
        """
        node_id = self.terminal_node_map.get(terminal_id)
        if node_id is None:
            logger.warning(f"Terminal '{terminal_id}' is not part of the extracted topology; treating it as ground.")
            return GROUND_NODE_ID
        return node_id

    def lookup(self, terminal_id: str) -> Optional[int]:
        return self.terminal_node_map.get(terminal_id)

    def terminals_by_node(self) -> Dict[int, List[str]]:
        return {node.node_id: list(node.terminal_ids) for node in self.nodes}
