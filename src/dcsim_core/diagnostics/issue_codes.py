# src/dcsim_core/diagnostics/issue_codes.py
import logging
from enum import Enum

from .issues import DiagnosticIssue, DiagnosticIssueLevel

logger = logging.getLogger(__name__)


class DiagnosticIssueCode(Enum):
    """
    Registry of diagnostic issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, default_level, message_template_str).
    """

    # --- Topology (TOPO_...) ---
    TOPO_DANGLING_CONNECTION = ("TOPO_DANGLING_CONNECTION", DiagnosticIssueLevel.WARNING, "Connection '{connection}' references terminal '{terminal_id}', which no element owns. The connection is ignored.")
    TOPO_FLOATING_NODE = ("TOPO_FLOATING_NODE", DiagnosticIssueLevel.WARNING, "Node {node_id} ({terminal_count} terminal(s)) has no conducting path to ground; its voltage is set only by the leakage conductance.")
    TOPO_UNRESOLVED_TERMINAL = ("TOPO_UNRESOLVED_TERMINAL", DiagnosticIssueLevel.WARNING, "Terminal '{terminal_id}' of element '{element_id}' is not part of any node and was treated as ground.")

    # --- Solve (SOLVE_...) ---
    SOLVE_SINGULAR_SYSTEM = ("SOLVE_SINGULAR_SYSTEM", DiagnosticIssueLevel.ERROR, "The circuit equations have no unique solution ({reason}).")
    SOLVE_INPUT_ERROR = ("SOLVE_INPUT_ERROR", DiagnosticIssueLevel.ERROR, "The MNA system could not be assembled: {reason}")

    # --- Result anomalies (ANOMALY_...) ---
    ANOMALY_NON_FINITE_VOLTAGE = ("ANOMALY_NON_FINITE_VOLTAGE", DiagnosticIssueLevel.ERROR, "Node {node_id} has a non-finite voltage ({value}).")
    ANOMALY_NON_FINITE_CURRENT = ("ANOMALY_NON_FINITE_CURRENT", DiagnosticIssueLevel.ERROR, "Element '{element_id}' has a non-finite current ({value}).")
    ANOMALY_SATURATED_CURRENT = ("ANOMALY_SATURATED_CURRENT", DiagnosticIssueLevel.WARNING, "Element '{element_id}' carries {value:.6g} A, above the {limit:g} A saturation limit (likely short circuit).")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def level(self) -> DiagnosticIssueLevel:
        return self.value[1]

    @property
    def template(self) -> str:
        return self.value[2]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except (KeyError, ValueError) as e:
            logger.error(f"Could not format message template of {self.name} (code: {self.code}): {e}. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: {e}. Template: '{self.template}' Args: {kwargs}"

    def issue(self, **kwargs) -> DiagnosticIssue:
        """Creates a DiagnosticIssue for this code, carrying the kwargs as details."""
        return DiagnosticIssue(
            level=self.level,
            code=self.code,
            message=self.format_message(**kwargs),
            element_id=kwargs.get('element_id'),
            details=dict(kwargs),
        )
