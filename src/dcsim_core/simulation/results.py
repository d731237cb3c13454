# src/dcsim_core/simulation/results.py
"""
Defines the result contract returned by the engine's `solve` entry point.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from ..diagnostics.issues import DiagnosticIssue
from ..diagnostics.results import AnomalyReport
from ..topology.results import TopologyResults


class SolveStatus(Enum):
    """Outcome of a solve call."""
    SOLVED = "SOLVED"
    NOTHING_TO_SOLVE = "NOTHING_TO_SOLVE"
    SINGULAR_SYSTEM = "SINGULAR_SYSTEM"
    INPUT_ERROR = "INPUT_ERROR"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class SolverResult:
    """
    Node voltages (volts, keyed by node id, ground 0 -> 0.0), element currents (amps) and
    element power (watts, positive = absorbing, negative = supplying).

    All three maps are empty unless `status` is SOLVED. `anomaly` is attached by the
    anomaly detector and only annotates the numbers.
    """
    node_voltages: Dict[int, float] = field(default_factory=dict)
    element_currents: Dict[str, float] = field(default_factory=dict)
    element_power: Dict[str, float] = field(default_factory=dict)
    status: SolveStatus = SolveStatus.SOLVED
    topology: Optional[TopologyResults] = field(default=None, compare=False)
    anomaly: Optional[AnomalyReport] = None
    issues: Tuple[DiagnosticIssue, ...] = ()
    diagnostic_report: Optional[str] = field(default=None, compare=False)

    @classmethod
    def empty(
        cls,
        status: SolveStatus,
        topology: Optional[TopologyResults] = None,
        issues: Tuple[DiagnosticIssue, ...] = (),
        diagnostic_report: Optional[str] = None,
    ) -> "SolverResult":
        return cls(status=status, topology=topology, issues=tuple(issues), diagnostic_report=diagnostic_report)

    @property
    def is_solved(self) -> bool:
        return self.status == SolveStatus.SOLVED

    @property
    def is_empty(self) -> bool:
        return not (self.node_voltages or self.element_currents or self.element_power)

    @property
    def is_singular(self) -> bool:
        return self.status == SolveStatus.SINGULAR_SYSTEM

    @property
    def is_anomalous(self) -> bool:
        return self.anomaly is not None and self.anomaly.is_anomalous
