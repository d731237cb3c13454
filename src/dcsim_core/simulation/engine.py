# src/dcsim_core/simulation/engine.py

"""
Defines the `DCSolveEngine`, the service that runs one DC operating-point solve.

The engine holds the imperative pipeline (extract -> number -> assemble -> factorize ->
solve -> derive). It raises diagnosable errors and leaves their conversion into result
values to the `solve` facade in `execution.py`.
"""
import logging
from typing import List, Optional

from ..data_structures import Schematic
from ..diagnostics.issue_codes import DiagnosticIssueCode
from ..diagnostics.issues import DiagnosticIssue
from ..topology import TopologyExtractor, TopologyResults
from .config import EngineConfig
from .derived import DerivedQuantitiesCalculator
from .mna import MnaAssembler
from .results import SolverResult, SolveStatus
from .solver import factorize_mna_matrix, solve_mna_system

logger = logging.getLogger(__name__)


class DCSolveEngine:
    """
    Runs the full pipeline for a single immutable schematic snapshot. Nothing is
    cached between calls; a new engine is created for every solve.
    """
    def __init__(self, schematic: Schematic, config: Optional[EngineConfig] = None):
        self.schematic: Schematic = schematic
        self.config: EngineConfig = config if config is not None else EngineConfig()
        # Set by execute() so the facade can attach the topology to a failed result.
        self.topology: Optional[TopologyResults] = None
        self.issues: List[DiagnosticIssue] = []
        logger.debug(f"DCSolveEngine initialized for {len(schematic.elements)} element(s).")

    def execute(self) -> SolverResult:
        """
        Raises:
            SingularMatrixError: If the assembled system has no unique solution.
            MnaInputError: If an element cannot be stamped.
        """
        if not self.schematic.elements:
            logger.debug("Empty schematic, nothing to solve.")
            return SolverResult.empty(SolveStatus.NOTHING_TO_SOLVE)

        self.topology = TopologyExtractor(self.schematic).analyze()
        self.issues = list(self.topology.issues)

        if self.topology.num_non_ground_nodes == 0:
            logger.debug("Topology has no non-ground node, nothing to solve.")
            return SolverResult.empty(SolveStatus.NOTHING_TO_SOLVE, topology=self.topology, issues=tuple(self.issues))

        system = MnaAssembler(self.schematic.elements, self.topology, self.config).assemble()
        for element_id, terminal_id in system.unresolved_terminals:
            self.issues.append(DiagnosticIssueCode.TOPO_UNRESOLVED_TERMINAL.issue(
                element_id=element_id, terminal_id=terminal_id
            ))

        factorization = factorize_mna_matrix(system.matrix, pivot_tolerance=self.config.pivot_tolerance)
        x = solve_mna_system(factorization, system.rhs)

        calculator = DerivedQuantitiesCalculator(self.topology, system, x, self.config)
        currents, power = calculator.compute(self.schematic.elements)

        return SolverResult(
            node_voltages=calculator.node_voltages,
            element_currents=currents,
            element_power=power,
            status=SolveStatus.SOLVED,
            topology=self.topology,
            issues=tuple(self.issues),
        )
