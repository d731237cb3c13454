# --- src/dcsim_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Numerical Constants for the MNA Engine ---

#: Tiny conductance added to every node-block diagonal entry so that a topologically
#: floating node does not make the matrix singular.
#: Value: 1e-12 Siemens (1 Tera-ohm to ground).
LEAKAGE_CONDUCTANCE_SIEMENS: float = 1.0e-12

#: An ideal short (R = 0) is a branch element with this conductance in series, so
#: that parallel shorts and a short across a source stay solvable.
#: Value: 1e12 Siemens (1 pico-ohm).
LARGE_CONDUCTANCE_SIEMENS: float = 1.0e12

#: Current magnitude above which a result is considered saturating (short-circuit like).
SATURATION_CURRENT_AMPERES: float = 9999.0

#: Threshold on the LU pivots of the row/column equilibrated matrix at or below which
#: the system is declared singular.
PIVOT_TOLERANCE: float = 1.0e-14

#: Current below which the summary treats the sources as delivering nothing.
ZERO_CURRENT_THRESHOLD_AMPERES: float = 1.0e-12

logger.debug("Defined core constants: LEAKAGE_CONDUCTANCE_SIEMENS, LARGE_CONDUCTANCE_SIEMENS, "
             "SATURATION_CURRENT_AMPERES, PIVOT_TOLERANCE")
