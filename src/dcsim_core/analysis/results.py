# src/dcsim_core/analysis/results.py
"""
Result contracts of the presentation-facing analysis helpers. They are derived from a
`SolverResult` on demand and never fed back into the engine.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class CircuitSummary:
    """
    Circuit-level statistics as shown in the editor's properties panel.

    `equivalent_resistance` is the total source voltage over the total source current,
    or infinity when no measurable current flows.
    """
    total_source_voltage: float
    total_source_current: float
    equivalent_resistance: float
    total_power: float
    element_count: int
    node_count: int
    branch_count: int
    has_non_finite: bool


@dataclass(frozen=True)
class ProbeReading:
    """Voltages at two probe points and their difference (a minus b)."""
    terminal_a: str
    terminal_b: str
    voltage_a: float
    voltage_b: float

    @property
    def difference(self) -> float:
        return self.voltage_a - self.voltage_b

    @property
    def magnitude(self) -> float:
        return abs(self.difference)
