# src/dcsim_core/simulation/derived.py
"""
Per-element currents and power from the solved MNA vector.

Sign conventions (terminals of 2-terminal kinds are [negative, positive]):
  * Resistor: I = (V+ - V-) / R, flowing into the positive terminal; P = |I|^2 R.
    An ideal short (R = 0) reads I from its MNA branch unknown; P = I^2 / g_large.
  * CurrentSource: I = value, entering at the positive terminal; P = (V+ - V-) * I.
  * VoltageSource / VCVS: I is the current leaving the (output) positive terminal into
    the network, the negated MNA branch unknown; P = -(V+ - V-) * I.
Positive power means the element absorbs energy, negative that it supplies it.
"""
import logging
import math
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..components import CurrentSource, ElementBase, Resistor, VCVS, VoltageSource
from ..topology.results import GROUND_NODE_ID, TopologyResults
from .config import EngineConfig
from .mna import MnaSystem, is_ideal_short

logger = logging.getLogger(__name__)


def extract_node_voltages(x: np.ndarray, num_nodes: int) -> Dict[int, float]:
    """Node i >= 1 reads x[i - 1]; ground is always exactly 0.0."""
    node_voltages: Dict[int, float] = {GROUND_NODE_ID: 0.0}
    for i in range(1, num_nodes + 1):
        node_voltages[i] = float(x[i - 1])
    return node_voltages


class DerivedQuantitiesCalculator:
    """Computes element currents and power for one solved system."""

    def __init__(
        self,
        topology: TopologyResults,
        system: MnaSystem,
        x: np.ndarray,
        config: Optional[EngineConfig] = None,
    ):
        self.topology = topology
        self.system = system
        self.x = np.asarray(x, dtype=float)
        self.config = config if config is not None else EngineConfig()
        self.node_voltages = extract_node_voltages(self.x, system.num_nodes)

    def terminal_voltage(self, terminal_id: str) -> float:
        node_id = self.topology.lookup(terminal_id)
        if node_id is None:
            return 0.0
        return self.node_voltages.get(node_id, 0.0)

    def voltage_across(self, positive: str, negative: str) -> float:
        return self.terminal_voltage(positive) - self.terminal_voltage(negative)

    def compute(self, elements: Sequence[ElementBase]) -> Tuple[Dict[str, float], Dict[str, float]]:
        """Returns (element_currents, element_power) keyed by element id."""
        currents: Dict[str, float] = {}
        power: Dict[str, float] = {}

        for element in elements:
            if isinstance(element, Resistor):
                current, absorbed = self._resistor(element)
            elif isinstance(element, CurrentSource):
                current, absorbed = self._current_source(element)
            elif isinstance(element, (VoltageSource, VCVS)):
                current, absorbed = self._voltage_defining(element)
            else:
                raise TypeError(f"No derived-quantity rule for element type '{type(element).__name__}'.")
            currents[element.element_id] = current
            power[element.element_id] = absorbed

        return currents, power

    def _resistor(self, element: Resistor) -> Tuple[float, float]:
        dv = self.voltage_across(element.positive_terminal, element.negative_terminal)
        resistance = element.resistance
        if math.isinf(resistance):
            return 0.0, 0.0
        if is_ideal_short(element):
            current = float(self.x[self.system.branch_row(element.element_id)])
            return current, current * current / self.config.large_conductance
        current = dv / resistance
        return current, abs(current * current * resistance)

    def _current_source(self, element: CurrentSource) -> Tuple[float, float]:
        dv = self.voltage_across(element.positive_terminal, element.negative_terminal)
        return element.current, dv * element.current

    def _voltage_defining(self, element: ElementBase) -> Tuple[float, float]:
        positive, negative = element.output_terminals
        dv = self.voltage_across(positive, negative)
        current = -float(self.x[self.system.branch_row(element.element_id)])
        return current, -dv * current
