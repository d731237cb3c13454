# src/dcsim_core/simulation/execution.py
"""
Provides the public entry points of the engine: `solve` and `solve_schematic`.

This module is a thin facade over `DCSolveEngine`. It guarantees that every expected
failure leaves as a result value: a singular system or an unstampable element yields an
empty, unsolved `SolverResult` carrying a status, an issue and the diagnostic report.
Every solved result is passed through the `AnomalyDetector` before it is returned.
"""
import logging
from typing import Any, Iterable, Optional

from ..components import ElementBase
from ..data_structures import Connection, Schematic
from ..diagnostics.anomaly import AnomalyDetector
from ..diagnostics.issue_codes import DiagnosticIssueCode
from ..errors import SolveRunError, format_diagnostic_report
from .config import EngineConfig
from .engine import DCSolveEngine
from .exceptions import MnaInputError, SingularMatrixError
from .results import SolverResult, SolveStatus

logger = logging.getLogger(__name__)


def _as_connection(item: Any) -> Connection:
    if isinstance(item, Connection):
        return item
    terminal_a, terminal_b = item
    return Connection(terminal_a=terminal_a, terminal_b=terminal_b)


def solve(
    elements: Iterable[ElementBase],
    connections: Iterable[Any] = (),
    config: Optional[EngineConfig] = None,
) -> SolverResult:
    """
    Solves the DC operating point of a set of elements and wires.

    Args:
        elements: Elements in creation order. The order decides ground tie-breaks.
        connections: `Connection` objects or (terminal_a, terminal_b) pairs. Pairs with
                     a None endpoint are wires still being drawn and are ignored.
        config: Optional numerical settings.

    Returns:
        A SolverResult. Check `status` before reading the maps.

    Raises:
        ElementDefinitionError: If the elements do not form a valid snapshot
                                (e.g. duplicate ids). Raised before any analysis.
    """
    schematic = Schematic(elements=tuple(elements), connections=tuple(_as_connection(c) for c in connections))
    return solve_schematic(schematic, config)


def solve_schematic(schematic: Schematic, config: Optional[EngineConfig] = None) -> SolverResult:
    """Solves a prepared `Schematic` snapshot. See `solve`."""
    effective_config = config if config is not None else EngineConfig()
    engine = DCSolveEngine(schematic, effective_config)

    try:
        logger.debug(
            f"Solving schematic: {len(schematic.elements)} element(s), {len(schematic.connections)} connection(s)."
        )
        result = engine.execute()

    except SingularMatrixError as e:
        logger.error(f"Circuit has no unique solution: {e}")
        issue = DiagnosticIssueCode.SOLVE_SINGULAR_SYSTEM.issue(reason=e.details)
        return SolverResult.empty(
            SolveStatus.SINGULAR_SYSTEM,
            topology=engine.topology,
            issues=tuple(engine.issues) + (issue,),
            diagnostic_report=e.get_diagnostic_report(),
        )

    except MnaInputError as e:
        logger.error(f"Circuit could not be assembled: {e}")
        issue = DiagnosticIssueCode.SOLVE_INPUT_ERROR.issue(reason=e.details, element_id=e.element_id)
        return SolverResult.empty(
            SolveStatus.INPUT_ERROR,
            topology=engine.topology,
            issues=tuple(engine.issues) + (issue,),
            diagnostic_report=e.get_diagnostic_report(),
        )

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during the solve: {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Solver Error Occurred ({type(e).__name__})",
            details=f"The engine encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report."
        )
        raise SolveRunError(report) from e

    if not result.is_solved:
        return result

    annotated = AnomalyDetector(schematic, effective_config).annotate(result)
    logger.info(
        f"Solve successful: {len(annotated.node_voltages)} node(s), {len(annotated.element_currents)} element(s)"
        f"{', anomalous result' if annotated.is_anomalous else ''}."
    )
    return annotated
