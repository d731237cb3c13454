# src/dcsim_core/simulation/__init__.py
from .config import EngineConfig, ConfigParsingError, parse_engine_config
from .exceptions import (
    MnaInputError,
    SingularMatrixError,
)
from .mna import MnaAssembler, MnaSystem
from .solver import MnaFactorization, solve_mna_system, factorize_mna_matrix
from .derived import DerivedQuantitiesCalculator, extract_node_voltages
from .results import SolverResult, SolveStatus
from .engine import DCSolveEngine
from .execution import solve, solve_schematic

__all__ = [
    # Configuration
    "EngineConfig",
    "ConfigParsingError",
    "parse_engine_config",
    # Exceptions
    "MnaInputError",
    "SingularMatrixError",
    # Core Classes
    "MnaAssembler",
    "MnaSystem",
    "MnaFactorization",
    "solve_mna_system",
    "factorize_mna_matrix",
    "DerivedQuantitiesCalculator",
    "extract_node_voltages",
    "DCSolveEngine",
    # Results and entry points
    "SolverResult",
    "SolveStatus",
    "solve",
    "solve_schematic",
]
