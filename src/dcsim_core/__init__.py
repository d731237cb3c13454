# src/dcsim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.debug("DCSim Core package initialized.")

from .units import ureg, pint, Quantity
from .components import (
    ElementKind, ElementBase, Resistor, VoltageSource, CurrentSource, VCVS, make_element,
    ElementDefinitionError,
)
from .data_structures import Connection, Schematic
from .topology import TopologyExtractor, TopologyResults, ElectricalNode, GROUND_NODE_ID
from .simulation import (
    EngineConfig, parse_engine_config, solve, solve_schematic, SolverResult, SolveStatus,
)
from .diagnostics import AnomalyDetector, AnomalyReport, DiagnosticIssue
from .analysis import CircuitSummary, ProbeReading, summarize, probe, terminal_voltage
from .parser import SchematicParser, ParsedSnapshot, load_schematic
from .errors import DCSimError, SchematicLoadError, SolveRunError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # Data Model
    "ElementKind", "ElementBase", "Resistor", "VoltageSource", "CurrentSource", "VCVS",
    "make_element", "Connection", "Schematic",
    # Topology
    "TopologyExtractor", "TopologyResults", "ElectricalNode", "GROUND_NODE_ID",
    # Simulation
    "EngineConfig", "parse_engine_config", "solve", "solve_schematic", "SolverResult", "SolveStatus",
    # Diagnostics
    "AnomalyDetector", "AnomalyReport", "DiagnosticIssue",
    # Analysis
    "CircuitSummary", "ProbeReading", "summarize", "probe", "terminal_voltage",
    # Parser
    "SchematicParser", "ParsedSnapshot", "load_schematic",
    # Top-Level Errors (Actionable Diagnostics)
    "DCSimError", "SchematicLoadError", "SolveRunError", "ElementDefinitionError",
]
