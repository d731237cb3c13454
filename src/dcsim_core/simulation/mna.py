# src/dcsim_core/simulation/mna.py

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..components import (
    CurrentSource, ElementBase, ElementKind, Resistor, VCVS, VoltageDefiningElement, VoltageSource
)
from ..topology.results import GROUND_NODE_ID, TopologyResults
from .config import EngineConfig
from .exceptions import MnaInputError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MnaSystem:
    """
    The assembled linear system A x = z.

    The unknown vector is x = [v_1 .. v_n, j_1 .. j_m]: the non-ground node voltages
    followed by one branch current per voltage-defining element, in element order.
    `j_k` is the MNA branch unknown, i.e. the current flowing from the node at the
    positive terminal into the element. Ideal shorts (0 ohm resistors) are branch
    elements too.
    """
    matrix: sp.csc_matrix
    rhs: np.ndarray
    num_nodes: int
    voltage_sources: Tuple[ElementBase, ...]
    unresolved_terminals: Tuple[Tuple[str, str], ...] = ()

    @property
    def size(self) -> int:
        return self.num_nodes + len(self.voltage_sources)

    def branch_row(self, element_id: str) -> int:
        """Returns the row/column index of a branch element's current unknown."""
        for k, source in enumerate(self.voltage_sources):
            if source.element_id == element_id:
                return self.num_nodes + k
        raise KeyError(f"Element '{element_id}' is not a voltage-defining element of this system.")

    def to_dense(self) -> np.ndarray:
        return self.matrix.toarray()


class MnaAssembler:
    """
    Builds the Modified Nodal Analysis system from a snapshot's elements and the node
    numbering produced by the topology extractor.

    Ground (node 0) is excluded from the matrix: node id i (i >= 1) maps to row and
    column i - 1. Voltage-defining elements (VoltageSource, VCVS) and ideal shorts get
    rows n .. n+m-1. A terminal missing from the node numbering is stamped as ground
    and reported in `MnaSystem.unresolved_terminals`.
    """
    def __init__(
        self,
        elements: Sequence[ElementBase],
        topology: TopologyResults,
        config: Optional[EngineConfig] = None,
    ):
        self.elements: Tuple[ElementBase, ...] = tuple(elements)
        self.topology: TopologyResults = topology
        self.config: EngineConfig = config if config is not None else EngineConfig()

        self.num_nodes: int = topology.num_non_ground_nodes
        self.voltage_sources: Tuple[ElementBase, ...] = tuple(
            e for e in self.elements if isinstance(e, VoltageDefiningElement) or is_ideal_short(e)
        )

        self._stampers: Dict[ElementKind, Callable[[ElementBase], None]] = {
            ElementKind.RESISTOR: self._stamp_resistor,
            ElementKind.CURRENT_SOURCE: self._stamp_current_source,
            ElementKind.VOLTAGE_SOURCE: self._stamp_voltage_source,
            ElementKind.VCVS: self._stamp_vcvs,
        }
        self._reset()

    @property
    def size(self) -> int:
        return self.num_nodes + len(self.voltage_sources)

    def _reset(self):
        self._rows: List[int] = []
        self._cols: List[int] = []
        self._data: List[float] = []
        self._rhs = np.zeros(self.size, dtype=float)
        self._unresolved: List[Tuple[str, str]] = []
        self._branch_rows: Dict[str, int] = {
            source.element_id: self.num_nodes + k for k, source in enumerate(self.voltage_sources)
        }

    def assemble(self) -> MnaSystem:
        """Stamps every element and returns the assembled system."""
        self._reset()
        size = self.size

        for element in self.elements:
            stamper = self._stampers.get(element.kind)
            if stamper is None:
                raise MnaInputError(
                    element_id=element.element_id,
                    details=f"No stamping rule for element kind '{element.kind}' ({type(element).__name__})."
                )
            stamper(element)

        leakage = self.config.leakage_conductance
        for i in range(self.num_nodes):
            self._add(i, i, leakage)

        matrix = sp.coo_matrix(
            (np.asarray(self._data, dtype=float), (np.asarray(self._rows, dtype=int), np.asarray(self._cols, dtype=int))),
            shape=(size, size),
        ).tocsc()  # duplicate entries are summed here

        logger.debug(
            f"Assembled MNA system: {self.num_nodes} node rows, {len(self.voltage_sources)} branch rows, "
            f"{matrix.nnz} non-zeros."
        )
        return MnaSystem(
            matrix=matrix,
            rhs=self._rhs.copy(),
            num_nodes=self.num_nodes,
            voltage_sources=self.voltage_sources,
            unresolved_terminals=tuple(self._unresolved),
        )

    # --- Index helpers ---

    def _row(self, element: ElementBase, terminal_id: str) -> Optional[int]:
        """Matrix row of the node holding `terminal_id`, or None for ground."""
        node_id = self.topology.lookup(terminal_id)
        if node_id is None:
            logger.warning(
                f"Terminal '{terminal_id}' of element '{element.element_id}' has no node; stamping it as ground."
            )
            self._unresolved.append((element.element_id, terminal_id))
            return None
        if node_id == GROUND_NODE_ID:
            return None
        return node_id - 1

    def _add(self, r: Optional[int], c: Optional[int], value: float):
        if r is None or c is None:
            return
        self._rows.append(r)
        self._cols.append(c)
        self._data.append(value)

    def _add_rhs(self, r: Optional[int], value: float):
        if r is not None:
            self._rhs[r] += value

    # --- Stamping rules ---

    def _stamp_resistor(self, element: ElementBase):
        if is_ideal_short(element):
            self._stamp_ideal_short(element)
            return
        if math.isinf(element.resistance):
            return
        g = 1.0 / element.resistance
        a = self._row(element, element.negative_terminal)
        b = self._row(element, element.positive_terminal)
        self._add(a, a, g)
        self._add(b, b, g)
        self._add(a, b, -g)
        self._add(b, a, -g)

    def _stamp_current_source(self, element: ElementBase):
        head = self._row(element, element.head_terminal)
        tail = self._row(element, element.tail_terminal)
        self._add_rhs(head, element.current)
        self._add_rhs(tail, -element.current)

    def _stamp_branch_incidence(
        self, element: ElementBase, idx: int, positive: str, negative: str
    ) -> Tuple[Optional[int], Optional[int]]:
        """B block: the branch current leaves the positive node into the element."""
        pos = self._row(element, positive)
        neg = self._row(element, negative)
        self._add(pos, idx, 1.0)
        self._add(neg, idx, -1.0)
        return pos, neg

    def _stamp_voltage_source(self, element: ElementBase):
        idx = self._branch_rows[element.element_id]
        pos, neg = self._stamp_branch_incidence(element, idx, *element.output_terminals)
        self._add(idx, pos, 1.0)
        self._add(idx, neg, -1.0)
        self._rhs[idx] = element.voltage

    def _stamp_ideal_short(self, element: ElementBase):
        """
        V(pos) - V(neg) - j / g_large = 0. The branch current is its own unknown, so it
        stays exact in series with ordinary resistors. The 1/g_large series term keeps
        parallel shorts and a short across a source solvable, with a saturating current.
        """
        idx = self._branch_rows[element.element_id]
        pos, neg = self._stamp_branch_incidence(element, idx, element.positive_terminal, element.negative_terminal)
        self._add(idx, pos, 1.0)
        self._add(idx, neg, -1.0)
        self._add(idx, idx, -1.0 / self.config.large_conductance)
        self._rhs[idx] = 0.0

    def _stamp_vcvs(self, element: ElementBase):
        idx = self._branch_rows[element.element_id]
        out_pos, out_neg = self._stamp_branch_incidence(element, idx, *element.output_terminals)
        in_pos = self._row(element, element.input_positive)
        in_neg = self._row(element, element.input_negative)
        gain = element.gain
        self._add(idx, out_pos, 1.0)
        self._add(idx, out_neg, -1.0)
        self._add(idx, in_pos, -gain)
        self._add(idx, in_neg, gain)
        self._rhs[idx] = 0.0


def is_ideal_short(element: ElementBase) -> bool:
    """A 0 ohm resistor, stamped as a branch element with its own current unknown."""
    return isinstance(element, Resistor) and element.resistance == 0.0


_UNSTAMPED_KINDS = set(ElementKind) - {
    ElementKind.RESISTOR, ElementKind.CURRENT_SOURCE, ElementKind.VOLTAGE_SOURCE, ElementKind.VCVS
}
if _UNSTAMPED_KINDS:
    raise ImportError(f"MnaAssembler has no stamping rule for element kinds: {sorted(map(str, _UNSTAMPED_KINDS))}")
