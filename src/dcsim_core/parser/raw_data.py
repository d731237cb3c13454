# src/dcsim_core/parser/raw_data.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..data_structures import Schematic
from ..simulation.config import EngineConfig


@dataclass(frozen=True)
class ParsedSnapshot:
    """A loaded schematic snapshot together with its engine settings."""
    name: str
    schematic: Schematic
    config: EngineConfig
    source_path: Optional[Path] = None
