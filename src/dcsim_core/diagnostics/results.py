# src/dcsim_core/diagnostics/results.py
from dataclasses import dataclass
from typing import FrozenSet, Tuple

from ..data_structures import Connection
from .issues import DiagnosticIssue


@dataclass(frozen=True)
class AnomalyReport:
    """
    Diagnostic annotation of a solve result. It never changes the numbers; it tells the
    presentation layer whether to show a short-circuit warning and what to highlight.
    """
    is_anomalous: bool
    has_non_finite_voltage: bool = False
    has_non_finite_current: bool = False
    saturated_elements: FrozenSet[str] = frozenset()
    suspect_element_ids: FrozenSet[str] = frozenset()
    suspect_connections: Tuple[Connection, ...] = ()
    issues: Tuple[DiagnosticIssue, ...] = ()

    @classmethod
    def clean(cls) -> "AnomalyReport":
        return cls(is_anomalous=False)

    @property
    def topology_suspect(self) -> bool:
        """True when the whole topology is suspect rather than a located short path."""
        return self.has_non_finite_voltage
