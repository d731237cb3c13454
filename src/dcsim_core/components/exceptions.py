"""
Defines the custom, diagnosable exceptions for the components subsystem.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class ElementDefinitionError(DiagnosableError):
    """
    Raised when an element or schematic snapshot violates the input contract, such as
    a wrong terminal count for the element kind, a non-numeric value or a duplicate id.
    """
    element_id: str
    details: str

    def __str__(self):
        return f"Invalid element '{self.element_id}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Element Definition Error",
            details=self.details,
            suggestion="Check the element's kind, value and terminal list. Resistors and independent sources take exactly 2 terminals, a VCVS takes 4.",
            context={'element_id': self.element_id}
        )
