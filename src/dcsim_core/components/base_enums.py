# src/dcsim_core/components/base_enums.py
from enum import Enum


class ElementKind(Enum):
    """
    The closed set of element kinds the engine can stamp. The value is the kind string
    used by the schematic document and the YAML snapshot format.
    """
    RESISTOR = "Resistor"
    VOLTAGE_SOURCE = "VoltageSource"
    CURRENT_SOURCE = "CurrentSource"
    VCVS = "VCVS"

    def __str__(self):
        return self.value
