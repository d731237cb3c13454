# src/dcsim_core/analysis/summary.py
import logging
import math
from typing import Optional

from ..components import VoltageSource
from ..constants import ZERO_CURRENT_THRESHOLD_AMPERES
from ..data_structures import Schematic
from ..simulation.results import SolverResult
from ..topology import TopologyExtractor, TopologyResults
from .results import CircuitSummary, ProbeReading

logger = logging.getLogger(__name__)


def terminal_voltage(topology: Optional[TopologyResults], result: SolverResult, terminal_id: str) -> float:
    """
    Voltage of the node holding `terminal_id`. A terminal outside the topology, or a
    node missing from the result (e.g. an unsolved circuit), reads 0 V.
    """
    if topology is None:
        return 0.0
    node_id = topology.lookup(terminal_id)
    if node_id is None:
        return 0.0
    return result.node_voltages.get(node_id, 0.0)


def probe(
    topology: Optional[TopologyResults], result: SolverResult, terminal_a: str, terminal_b: str
) -> ProbeReading:
    """Measures the voltage between two terminals, like a voltmeter across them."""
    return ProbeReading(
        terminal_a=terminal_a,
        terminal_b=terminal_b,
        voltage_a=terminal_voltage(topology, result, terminal_a),
        voltage_b=terminal_voltage(topology, result, terminal_b),
    )


def summarize(schematic: Schematic, result: SolverResult) -> CircuitSummary:
    """
    Computes circuit-level statistics for a schematic and its solve result.

    Total power is the sum over elements of |V(t0) - V(t1)| * |I|, where t0, t1 are the
    element's first two terminals (the output pair for a VCVS). It is a magnitude
    figure, unlike the signed per-element power of the result.
    """
    topology = result.topology
    if topology is None:
        topology = TopologyExtractor(schematic).analyze()

    sources = [e for e in schematic.elements if isinstance(e, VoltageSource)]
    total_voltage = sum(source.voltage for source in sources)
    total_current = sum(abs(result.element_currents.get(source.element_id, 0.0)) for source in sources)
    if total_current > ZERO_CURRENT_THRESHOLD_AMPERES:
        equivalent_resistance = total_voltage / total_current
    else:
        equivalent_resistance = math.inf

    element_map = schematic.element_map
    total_power = 0.0
    for element_id, current in result.element_currents.items():
        element = element_map.get(element_id)
        if element is None:
            continue
        dv = terminal_voltage(topology, result, element.terminals[0]) - terminal_voltage(
            topology, result, element.terminals[1]
        )
        total_power += abs(dv) * abs(current)

    has_non_finite = any(not math.isfinite(v) for v in result.node_voltages.values())

    summary = CircuitSummary(
        total_source_voltage=total_voltage,
        total_source_current=total_current,
        equivalent_resistance=equivalent_resistance,
        total_power=total_power,
        element_count=len(schematic.elements),
        node_count=topology.num_nodes,
        branch_count=len(schematic.bound_connections) + len(schematic.elements),
        has_non_finite=has_non_finite,
    )
    logger.debug(f"Circuit summary: {summary}")
    return summary
