# src/dcsim_core/diagnostics/issues.py
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class DiagnosticIssueLevel(Enum):
    """Severity level of a diagnostic issue."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class DiagnosticIssue:
    """
    A single finding attached to a solve result: a leniency the engine applied, a
    topology warning, or an anomaly in the numbers.
    """
    level: DiagnosticIssueLevel
    code: str
    message: str
    element_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __str__(self) -> str:
        parts = [f"[{self.level.name} - {self.code}]"]
        if self.element_id:
            parts.append(f"Element: {self.element_id}")
        parts.append(f"Message: {self.message}")

        if self.details:
            filtered_details = {k: v for k, v in self.details.items() if k != 'element_id'}
            if filtered_details:
                details_str = ", ".join(f"{k}={v}" for k, v in sorted(filtered_details.items()))
                parts.append(f"Details: ({details_str})")

        return " ".join(parts)
