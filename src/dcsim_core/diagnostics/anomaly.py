# src/dcsim_core/diagnostics/anomaly.py
"""
Flags solve results that are numerically suspicious and points at the likely fault.

The detector is purely diagnostic: it never changes a node voltage, current or power
value. The presentation layer uses the report to decide whether to show a
short-circuit warning and which wires to highlight.
"""
import dataclasses
import logging
import math
from typing import TYPE_CHECKING, FrozenSet, List, Optional, Set

from ..components import VoltageSource
from ..constants import SATURATION_CURRENT_AMPERES
from ..data_structures import Schematic
from .issue_codes import DiagnosticIssueCode
from .issues import DiagnosticIssue
from .results import AnomalyReport

if TYPE_CHECKING:
    from ..simulation.config import EngineConfig
    from ..simulation.results import SolverResult

logger = logging.getLogger(__name__)


class AnomalyDetector:
    """
    Inspects a SolverResult for non-finite values and saturated currents.

    Attribution rules:
      * any non-finite node voltage: the whole topology is suspect (every element and
        every connection);
      * otherwise, if the result is anomalous: only the connections touching an
        independent voltage source's terminals are suspect, as the likely short path.
    """
    def __init__(self, schematic: Schematic, config: Optional["EngineConfig"] = None):
        self.schematic = schematic
        self.saturation_current: float = (
            config.saturation_current if config is not None else SATURATION_CURRENT_AMPERES
        )

    def inspect(self, result: "SolverResult") -> AnomalyReport:
        issues: List[DiagnosticIssue] = []

        for node_id, voltage in sorted(result.node_voltages.items()):
            if not math.isfinite(voltage):
                issues.append(DiagnosticIssueCode.ANOMALY_NON_FINITE_VOLTAGE.issue(node_id=node_id, value=voltage))
        has_non_finite_voltage = bool(issues)

        limit = self.saturation_current
        saturated: Set[str] = set()
        has_non_finite_current = False
        for element_id, current in result.element_currents.items():
            if not math.isfinite(current):
                has_non_finite_current = True
                issues.append(DiagnosticIssueCode.ANOMALY_NON_FINITE_CURRENT.issue(element_id=element_id, value=current))
            elif abs(current) > limit:
                saturated.add(element_id)
                issues.append(DiagnosticIssueCode.ANOMALY_SATURATED_CURRENT.issue(
                    element_id=element_id, value=current, limit=limit
                ))

        is_anomalous = has_non_finite_voltage or has_non_finite_current or bool(saturated)
        if not is_anomalous:
            return AnomalyReport.clean()

        if has_non_finite_voltage:
            suspect_elements: FrozenSet[str] = frozenset(e.element_id for e in self.schematic.elements)
            suspect_connections = tuple(self.schematic.connections)
        else:
            suspect_elements = frozenset()
            source_terminals = self.independent_source_terminals()
            suspect_connections = tuple(c for c in self.schematic.connections if c.touches(source_terminals))

        logger.warning(
            f"Anomalous solve result: non-finite voltage={has_non_finite_voltage}, "
            f"non-finite current={has_non_finite_current}, saturated={sorted(saturated)}; "
            f"{len(suspect_connections)} suspect connection(s)."
        )
        return AnomalyReport(
            is_anomalous=True,
            has_non_finite_voltage=has_non_finite_voltage,
            has_non_finite_current=has_non_finite_current,
            saturated_elements=frozenset(saturated),
            suspect_element_ids=suspect_elements,
            suspect_connections=suspect_connections,
            issues=tuple(issues),
        )

    def annotate(self, result: "SolverResult") -> "SolverResult":
        """Returns a copy of `result` with the anomaly report attached."""
        report = self.inspect(result)
        return dataclasses.replace(result, anomaly=report, issues=tuple(result.issues) + report.issues)

    def independent_source_terminals(self) -> Set[str]:
        return {
            terminal_id
            for element in self.schematic.elements
            if isinstance(element, VoltageSource)
            for terminal_id in element.terminals
        }
