# src/dcsim_core/analysis/__init__.py
"""
Presentation-facing helpers computed from a solve result: circuit summary statistics
and voltage probing between terminals.
"""
from .results import CircuitSummary, ProbeReading
from .summary import probe, summarize, terminal_voltage

__all__ = [
    # Result Contracts
    "CircuitSummary",
    "ProbeReading",
    # Helpers
    "summarize",
    "probe",
    "terminal_voltage",
]
