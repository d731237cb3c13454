# src/dcsim_core/components/base.py

import logging
import math
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterator, List, Optional, Sequence, Tuple, Type

from .base_enums import ElementKind
from .exceptions import ElementDefinitionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Terminal:
    """A connection point of an element. It has no lifecycle of its own."""
    terminal_id: str
    element_id: str
    slot: str


@dataclass(frozen=True)
class ElementBase(ABC):
    """
    The abstract base class for all schematic elements.

    An element is immutable value data: an identity, a scalar value in the kind's native
    unit and an ordered tuple of terminal ids whose positions carry a fixed, per-kind
    meaning (see `declare_terminal_slots`).
    """
    element_id: str
    value: float
    terminals: Tuple[str, ...]

    kind: ClassVar[Optional[ElementKind]] = None

    def __post_init__(self):
        if not isinstance(self.element_id, str) or not self.element_id:
            raise ElementDefinitionError(
                element_id=str(self.element_id),
                details="Element id must be a non-empty string."
            )

        if isinstance(self.value, bool) or not isinstance(self.value, numbers.Real):
            raise ElementDefinitionError(
                element_id=self.element_id,
                details=f"Value must be a real number, got {self.value!r} ({type(self.value).__name__})."
            )
        if math.isnan(self.value):
            raise ElementDefinitionError(element_id=self.element_id, details="Value must not be NaN.")
        object.__setattr__(self, 'value', float(self.value))

        terminals = tuple(self.terminals)
        slots = type(self).declare_terminal_slots()
        if len(terminals) != len(slots):
            raise ElementDefinitionError(
                element_id=self.element_id,
                details=(
                    f"{type(self).__name__} requires exactly {len(slots)} terminals "
                    f"{list(slots)}, but {len(terminals)} were given: {list(terminals)}."
                )
            )
        if not all(isinstance(t, str) and t for t in terminals):
            raise ElementDefinitionError(
                element_id=self.element_id,
                details=f"Terminal ids must be non-empty strings, got {list(terminals)}."
            )
        if len(set(terminals)) != len(terminals):
            raise ElementDefinitionError(
                element_id=self.element_id,
                details=f"Terminal ids must be unique within an element, got {list(terminals)}."
            )
        object.__setattr__(self, 'terminals', terminals)

    @classmethod
    @abstractmethod
    def declare_terminal_slots(cls) -> Tuple[str, ...]:
        """Declare the ordered slot names of the element's terminals (e.g. ('A', 'B'))."""
        pass

    @classmethod
    @abstractmethod
    def declare_value_dimension(cls) -> str:
        """Declare the physical dimension of `value` as a pint unit string."""
        pass

    def iter_terminals(self) -> Iterator[Terminal]:
        for slot, terminal_id in zip(type(self).declare_terminal_slots(), self.terminals):
            yield Terminal(terminal_id=terminal_id, element_id=self.element_id, slot=slot)

    def terminal_for_slot(self, slot: str) -> str:
        slots = type(self).declare_terminal_slots()
        try:
            return self.terminals[slots.index(slot)]
        except ValueError:
            raise KeyError(f"{type(self).__name__} has no terminal slot '{slot}'. Slots: {list(slots)}") from None

    def __str__(self) -> str:
        return f"{type(self).__name__}('{self.element_id}', value={self.value:g})"


# --- Global Element Registry and Decorator ---

ELEMENT_REGISTRY: Dict[str, Type[ElementBase]] = {}


def register_element(kind: ElementKind):
    """
    A class decorator to register an element class under its kind string, making it
    available to `make_element` and the schematic loader.
    """
    def decorator(cls: Type[ElementBase]):
        if not issubclass(cls, ElementBase):
            raise TypeError(f"Class {cls.__name__} must inherit from ElementBase.")

        slots = cls.declare_terminal_slots()
        if not isinstance(slots, tuple) or not all(isinstance(s, str) and s for s in slots):
            raise TypeError(
                f"Element class '{cls.__name__}' violates API contract. "
                f"declare_terminal_slots() must return a tuple of non-empty strings, but returned: {slots}."
            )
        if len(set(slots)) != len(slots):
            raise TypeError(
                f"Element class '{cls.__name__}' violates API contract. "
                f"declare_terminal_slots() returned duplicate slot names: {slots}."
            )

        if kind.value in ELEMENT_REGISTRY:
            logger.warning(f"Element kind '{kind}' is being redefined/overwritten.")
        cls.kind = kind
        ELEMENT_REGISTRY[kind.value] = cls
        logger.debug(f"Registered element kind '{kind}' -> {cls.__name__}")
        return cls
    return decorator


def make_element(
    kind,
    element_id: str,
    value: float,
    terminals: Optional[Sequence[str]] = None,
) -> ElementBase:
    """
    Creates an element of the given kind. When `terminals` is omitted, terminal ids are
    generated as '<element_id>.<slot>' (e.g. 'R1.A', 'R1.B').
    """
    kind_str = kind.value if isinstance(kind, ElementKind) else str(kind)
    cls = ELEMENT_REGISTRY.get(kind_str)
    if cls is None:
        raise ElementDefinitionError(
            element_id=str(element_id),
            details=f"Unknown element kind '{kind_str}'. Available kinds: {sorted(ELEMENT_REGISTRY)}."
        )
    if terminals is None:
        terminals = [f"{element_id}.{slot}" for slot in cls.declare_terminal_slots()]
    return cls(element_id=element_id, value=value, terminals=tuple(terminals))


def registered_kinds() -> List[str]:
    return sorted(ELEMENT_REGISTRY)
