# src/dcsim_core/components/elements.py
"""
Concrete element kinds: Resistor, VoltageSource, CurrentSource and VCVS.

Polarity convention for every 2-terminal kind: terminals are ordered
[negative, positive] (slots 'A', 'B').
"""
import logging
from dataclasses import dataclass
from typing import Tuple

from .base import ElementBase, register_element
from .base_enums import ElementKind

logger = logging.getLogger(__name__)

TWO_TERMINAL_SLOTS: Tuple[str, ...] = ("A", "B")
FOUR_TERMINAL_SLOTS: Tuple[str, ...] = ("A", "B", "C", "D")


@dataclass(frozen=True)
class TwoTerminalElement(ElementBase):
    """Shared accessors for the [negative, positive] slot layout."""

    @classmethod
    def declare_terminal_slots(cls) -> Tuple[str, ...]:
        return TWO_TERMINAL_SLOTS

    @property
    def negative_terminal(self) -> str:
        return self.terminals[0]

    @property
    def positive_terminal(self) -> str:
        return self.terminals[1]


@register_element(ElementKind.RESISTOR)
@dataclass(frozen=True)
class Resistor(TwoTerminalElement):
    """An ideal resistor. `value` is the resistance in ohms; 0 is an ideal short, inf an open."""

    @classmethod
    def declare_value_dimension(cls) -> str:
        return "ohm"

    @property
    def resistance(self) -> float:
        return self.value


@register_element(ElementKind.VOLTAGE_SOURCE)
@dataclass(frozen=True)
class VoltageSource(TwoTerminalElement):
    """An independent voltage source enforcing V(positive) - V(negative) = value."""

    @classmethod
    def declare_value_dimension(cls) -> str:
        return "volt"

    @property
    def voltage(self) -> float:
        return self.value

    @property
    def output_terminals(self) -> Tuple[str, str]:
        return self.positive_terminal, self.negative_terminal


@register_element(ElementKind.CURRENT_SOURCE)
@dataclass(frozen=True)
class CurrentSource(TwoTerminalElement):
    """
    An independent current source. `value` enters the source at its positive terminal
    (the arrow tail) and is injected into the network at its negative terminal (the
    arrow head).
    """

    @classmethod
    def declare_value_dimension(cls) -> str:
        return "ampere"

    @property
    def current(self) -> float:
        return self.value

    @property
    def head_terminal(self) -> str:
        return self.negative_terminal

    @property
    def tail_terminal(self) -> str:
        return self.positive_terminal


@register_element(ElementKind.VCVS)
@dataclass(frozen=True)
class VCVS(ElementBase):
    """
    A voltage-controlled voltage source:
    V(out+) - V(out-) = gain * (V(in+) - V(in-)).

    Terminals are ordered [output_positive, output_negative, input_positive, input_negative].
    The control inputs draw no current.
    """

    @classmethod
    def declare_terminal_slots(cls) -> Tuple[str, ...]:
        return FOUR_TERMINAL_SLOTS

    @classmethod
    def declare_value_dimension(cls) -> str:
        return "dimensionless"

    @property
    def gain(self) -> float:
        return self.value

    @property
    def output_positive(self) -> str:
        return self.terminals[0]

    @property
    def output_negative(self) -> str:
        return self.terminals[1]

    @property
    def input_positive(self) -> str:
        return self.terminals[2]

    @property
    def input_negative(self) -> str:
        return self.terminals[3]

    @property
    def output_terminals(self) -> Tuple[str, str]:
        return self.output_positive, self.output_negative


# Voltage-defining kinds get an extra MNA unknown (their branch current).
VoltageDefiningElement = (VoltageSource, VCVS)
