import logging
logger = logging.getLogger(__name__)

from .base_enums import ElementKind
from .base import (
    ElementBase, Terminal, ELEMENT_REGISTRY, register_element, make_element, registered_kinds
)
from .exceptions import ElementDefinitionError
# Import concrete elements to trigger registration
from .elements import (
    TwoTerminalElement, Resistor, VoltageSource, CurrentSource, VCVS, VoltageDefiningElement
)

logger.debug(f"Available element kinds: {list(ELEMENT_REGISTRY.keys())}")

__all__ = [
    "ElementKind",
    "ElementBase",
    "Terminal",
    "ELEMENT_REGISTRY",
    "register_element",
    "make_element",
    "registered_kinds",
    "ElementDefinitionError",
    "TwoTerminalElement",
    "Resistor",
    "VoltageSource",
    "CurrentSource",
    "VCVS",
    "VoltageDefiningElement",
]
