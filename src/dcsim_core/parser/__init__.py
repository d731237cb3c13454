# src/dcsim_core/parser/__init__.py
from .raw_data import ParsedSnapshot
from .parser import EnhancedValidator, SchematicParser, load_schematic
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    "ParsedSnapshot",
    "EnhancedValidator",
    "SchematicParser",
    "load_schematic",
    "ParsingError",
    "SchemaValidationError",
]
