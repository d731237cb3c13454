# src/dcsim_core/topology/extractor.py

"""
Resolves physical wiring into electrical nodes and numbers them.
"""

import logging
from typing import Dict, List, Sequence, Set, Tuple

import networkx as nx

from ..components import CurrentSource, ElementBase, Resistor, VCVS, VoltageSource
from ..data_structures import Connection, Schematic
from ..diagnostics.issue_codes import DiagnosticIssueCode
from ..diagnostics.issues import DiagnosticIssue
from .results import GROUND_NODE_ID, ElectricalNode, TopologyResults
from .union_find import DisjointSet

logger = logging.getLogger(__name__)


def number_nodes(groups: Sequence[Sequence[int]]) -> List[List[int]]:
    """
    Orders terminal groups for node numbering: descending terminal count, ties broken by
    the lowest dense terminal index in the group (i.e. the earliest-created element's
    earliest slot). Position 0 of the returned list is ground.

    Groups are expected to hold dense terminal indices.
    """
    return sorted((list(g) for g in groups), key=lambda g: (-len(g), min(g)))


class TopologyExtractor:
    """
    Groups the terminals of a schematic snapshot into electrical nodes.

    The extractor is stateless apart from the snapshot it reads: every call to
    `analyze()` recomputes from scratch.
    """
    def __init__(self, schematic: Schematic):
        if not isinstance(schematic, Schematic):
            raise TypeError("TopologyExtractor requires a Schematic snapshot.")
        self.schematic: Schematic = schematic

    def analyze(self) -> TopologyResults:
        """Runs union-find, numbers the nodes and checks for floating nodes."""
        terminal_ids = self.schematic.terminal_ids
        index_of: Dict[str, int] = {terminal_id: i for i, terminal_id in enumerate(terminal_ids)}

        groups, dangling, issues = self._extract_groups(terminal_ids, index_of)
        ordered_groups = number_nodes(groups)

        nodes = tuple(
            ElectricalNode(node_id=node_id, terminal_ids=tuple(terminal_ids[i] for i in group))
            for node_id, group in enumerate(ordered_groups)
        )
        terminal_node_map = {
            terminal_id: node.node_id for node in nodes for terminal_id in node.terminal_ids
        }

        floating = self._find_floating_nodes(nodes, terminal_node_map)
        for node_id in floating:
            issues.append(DiagnosticIssueCode.TOPO_FLOATING_NODE.issue(
                node_id=node_id, terminal_count=len(nodes[node_id])
            ))
        if floating:
            logger.warning(f"Nodes without a conducting path to ground: {list(floating)}")

        logger.debug(
            f"Topology extracted: {len(terminal_ids)} terminals, "
            f"{len(self.schematic.bound_connections)} bound connections, {len(nodes)} nodes."
        )
        return TopologyResults(
            nodes=nodes,
            terminal_node_map=terminal_node_map,
            dangling_connections=tuple(dangling),
            floating_node_ids=tuple(floating),
            issues=tuple(issues),
        )

    def extract_groups(self) -> List[Tuple[str, ...]]:
        """Returns the terminal equivalence classes as terminal-id tuples (unnumbered)."""
        terminal_ids = self.schematic.terminal_ids
        index_of = {terminal_id: i for i, terminal_id in enumerate(terminal_ids)}
        groups, _, _ = self._extract_groups(terminal_ids, index_of)
        return [tuple(terminal_ids[i] for i in group) for group in groups]

    def _extract_groups(
        self, terminal_ids: List[str], index_of: Dict[str, int]
    ) -> Tuple[List[List[int]], List[Connection], List[DiagnosticIssue]]:
        disjoint_set = DisjointSet(len(terminal_ids))
        dangling: List[Connection] = []
        issues: List[DiagnosticIssue] = []

        for connection in self.schematic.connections:
            if not connection.is_bound:
                logger.debug(f"Skipping in-progress connection {connection}.")
                continue

            missing = [t for t in (connection.terminal_a, connection.terminal_b) if t not in index_of]
            if missing:
                dangling.append(connection)
                for terminal_id in missing:
                    issues.append(DiagnosticIssueCode.TOPO_DANGLING_CONNECTION.issue(
                        connection=str(connection), terminal_id=terminal_id
                    ))
                logger.warning(f"Ignoring connection {connection}: unknown terminal(s) {missing}.")
                continue

            disjoint_set.union(index_of[connection.terminal_a], index_of[connection.terminal_b])

        return disjoint_set.groups(), dangling, issues

    def _find_floating_nodes(
        self, nodes: Tuple[ElectricalNode, ...], terminal_node_map: Dict[str, int]
    ) -> List[int]:
        """
        Finds nodes with no conducting path to ground. Conducting branches are resistors
        (unless open), voltage sources and VCVS outputs; current sources and VCVS control
        inputs do not tie node potentials together.
        """
        if not nodes:
            return []

        graph = nx.Graph()
        graph.add_nodes_from(node.node_id for node in nodes)
        for element in self.schematic.elements:
            for a, b in self._conducting_pairs(element):
                node_a, node_b = terminal_node_map[a], terminal_node_map[b]
                if node_a != node_b:
                    graph.add_edge(node_a, node_b)

        grounded: Set[int] = nx.node_connected_component(graph, GROUND_NODE_ID)
        return sorted(n for n in graph.nodes if n not in grounded)

    @staticmethod
    def _conducting_pairs(element: ElementBase) -> List[Tuple[str, str]]:
        if isinstance(element, Resistor):
            if element.resistance == float("inf"):
                return []
            return [(element.negative_terminal, element.positive_terminal)]
        if isinstance(element, VoltageSource):
            return [(element.negative_terminal, element.positive_terminal)]
        if isinstance(element, VCVS):
            return [(element.output_negative, element.output_positive)]
        if isinstance(element, CurrentSource):
            return []
        raise TypeError(f"No connectivity rule for element type '{type(element).__name__}'.")
