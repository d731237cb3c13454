"""
Defines custom, diagnosable exceptions raised while assembling and solving the MNA system.

These never leave the engine: the `solve` entry point turns them into an unsolved
`SolverResult` that carries their diagnostic report.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class MnaInputError(DiagnosableError):
    """
    Raised for structural errors found while setting up the MNA system, such as an
    element kind the assembler cannot stamp.
    """
    element_id: str
    details: str

    def __str__(self):
        return f"MNA input error for '{self.element_id}': {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for an MNA input error."""
        return format_diagnostic_report(
            error_type="MNA Input Error",
            details=self.details,
            suggestion="The element could not be stamped into the circuit equations. Check its kind and terminals.",
            context={'element_id': self.element_id}
        )


@dataclass()
class SingularMatrixError(DiagnosableError, np.linalg.LinAlgError):
    """
    Raised when the MNA matrix has no unique solution.

    This class uses multiple inheritance to be catchable both as our custom
    `DiagnosableError` and as a standard `LinAlgError`.
    """
    details: str
    matrix_size: Optional[int] = None

    def __str__(self):
        size_str = f" ({self.matrix_size}x{self.matrix_size})" if self.matrix_size is not None else ""
        return f"Singular matrix detected{size_str}: {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for a singular matrix error."""
        return format_diagnostic_report(
            error_type="Singular Matrix Encountered",
            details=self.details,
            suggestion="This is often caused by two voltage sources forcing different voltages on the same pair of nodes, a loop of voltage sources, or a dependent source loop with no independent reference.",
            context={'matrix_size': f"{self.matrix_size}x{self.matrix_size}" if self.matrix_size is not None else None}
        )
