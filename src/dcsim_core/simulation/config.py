import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import pint

from ..constants import (
    LARGE_CONDUCTANCE_SIEMENS,
    LEAKAGE_CONDUCTANCE_SIEMENS,
    PIVOT_TOLERANCE,
    SATURATION_CURRENT_AMPERES,
)
from ..units import to_magnitude

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during engine configuration parsing."""
    pass


@dataclass(frozen=True)
class EngineConfig:
    """Numerical settings of the engine. The defaults suit interactive schematics."""
    leakage_conductance: float = LEAKAGE_CONDUCTANCE_SIEMENS
    large_conductance: float = LARGE_CONDUCTANCE_SIEMENS
    saturation_current: float = SATURATION_CURRENT_AMPERES
    pivot_tolerance: float = PIVOT_TOLERANCE

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not value >= 0.0:
                raise ConfigParsingError(f"Setting '{f.name}' must be a non-negative number, got {value!r}.")
        if self.large_conductance == 0.0:
            raise ConfigParsingError("Setting 'large_conductance' must be positive.")


_SETTING_DIMENSIONS: Dict[str, str] = {
    "leakage_conductance": "siemens",
    "large_conductance": "siemens",
    "saturation_current": "ampere",
    "pivot_tolerance": "dimensionless",
}


def parse_engine_config(raw_config: Optional[Mapping[str, Any]]) -> EngineConfig:
    """
    Parses a raw settings mapping (numbers or quantity strings such as "1 pS" or
    "10 kA") into an EngineConfig. Missing keys keep their defaults.
    """
    if not raw_config:
        return EngineConfig()

    unknown = sorted(set(raw_config) - set(_SETTING_DIMENSIONS))
    if unknown:
        raise ConfigParsingError(f"Unknown engine setting(s): {unknown}. Known settings: {sorted(_SETTING_DIMENSIONS)}.")

    values: Dict[str, float] = {}
    try:
        for key, raw_value in raw_config.items():
            values[key] = to_magnitude(raw_value, _SETTING_DIMENSIONS[key])
    except (ValueError, TypeError, pint.DimensionalityError, pint.UndefinedUnitError) as e:
        raise ConfigParsingError(f"Failed to parse engine setting '{key}': {e}") from e

    config = EngineConfig(**values)
    logger.debug(f"Parsed engine configuration: {config}")
    return config
