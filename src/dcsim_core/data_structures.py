# src/dcsim_core/data_structures.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .components import ElementBase, ElementDefinitionError, make_element

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connection:
    """
    A wire joining two terminals. Either end may be None while the wire is still being
    drawn; such a connection is "in progress" and takes no part in the analysis.
    """
    terminal_a: Optional[str]
    terminal_b: Optional[str]
    connection_id: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return bool(self.terminal_a) and bool(self.terminal_b)

    def touches(self, terminal_ids: Set[str]) -> bool:
        return self.terminal_a in terminal_ids or self.terminal_b in terminal_ids

    def __str__(self) -> str:
        name = self.connection_id or "wire"
        return f"{name}({self.terminal_a} -- {self.terminal_b})"


@dataclass(frozen=True)
class Schematic:
    """
    The immutable snapshot the engine analyzes: an ordered tuple of elements and a tuple
    of connections. Element order is creation order and is significant for node numbering.
    """
    elements: Tuple[ElementBase, ...]
    connections: Tuple[Connection, ...] = ()

    _terminal_owner: Dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'elements', tuple(self.elements))
        object.__setattr__(self, 'connections', tuple(self.connections))

        seen_ids: Set[str] = set()
        owner: Dict[str, str] = {}
        for element in self.elements:
            if not isinstance(element, ElementBase):
                raise TypeError(f"Schematic elements must be ElementBase instances, got {type(element).__name__}.")
            if element.element_id in seen_ids:
                raise ElementDefinitionError(
                    element_id=element.element_id,
                    details="Duplicate element id in schematic."
                )
            seen_ids.add(element.element_id)
            for terminal_id in element.terminals:
                if terminal_id in owner:
                    raise ElementDefinitionError(
                        element_id=element.element_id,
                        details=f"Terminal '{terminal_id}' is already owned by element '{owner[terminal_id]}'."
                    )
                owner[terminal_id] = element.element_id
        object.__setattr__(self, '_terminal_owner', owner)

    @property
    def terminal_ids(self) -> List[str]:
        """All terminal ids, in element order then slot order."""
        return [terminal_id for element in self.elements for terminal_id in element.terminals]

    @property
    def element_map(self) -> Dict[str, ElementBase]:
        return {element.element_id: element for element in self.elements}

    @property
    def bound_connections(self) -> List[Connection]:
        return [c for c in self.connections if c.is_bound]

    def owner_of(self, terminal_id: str) -> Optional[str]:
        """Returns the id of the element owning `terminal_id`, or None if no element does."""
        return self._terminal_owner.get(terminal_id)

    def has_terminal(self, terminal_id: str) -> bool:
        return terminal_id in self._terminal_owner

    @classmethod
    def from_records(
        cls,
        element_records: Iterable[Mapping[str, Any]],
        connection_records: Iterable[Mapping[str, Any]] = (),
    ) -> "Schematic":
        """
        Builds a snapshot from plain mappings as handed over by a document model:
        elements as {id, kind, value, terminals} and connections as
        {terminalA, terminalB} (snake_case keys are accepted as well).
        """
        elements = [
            make_element(
                kind=record["kind"],
                element_id=record["id"],
                value=record["value"],
                terminals=record.get("terminals"),
            )
            for record in element_records
        ]
        connections = [
            Connection(
                terminal_a=record.get("terminalA", record.get("terminal_a")),
                terminal_b=record.get("terminalB", record.get("terminal_b")),
                connection_id=record.get("id"),
            )
            for record in connection_records
        ]
        return cls(elements=tuple(elements), connections=tuple(connections))
