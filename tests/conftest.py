# tests/conftest.py
import pytest

from dcsim_core.components import make_element
from dcsim_core.data_structures import Connection, Schematic


def wire(a, b, connection_id=None) -> Connection:
    return Connection(terminal_a=a, terminal_b=b, connection_id=connection_id)


def single_resistor_loop(voltage: float = 10.0, resistance: float = 1000.0) -> Schematic:
    """
    V1 across R1. Ground is the group {V1.A, R1.A}; node 1 is {V1.B, R1.B} at +voltage.
    """
    v1 = make_element("VoltageSource", "V1", voltage)
    r1 = make_element("Resistor", "R1", resistance)
    return Schematic(
        elements=(v1, r1),
        connections=(wire("V1.B", "R1.B", "w1"), wire("V1.A", "R1.A", "w2")),
    )


def series_divider(voltage: float, r1: float, r2: float) -> Schematic:
    """
    V1 -> R1 -> R2 -> back to V1. Ground is {V1.A, R2.A}, node 1 is the source's positive
    side {V1.B, R1.B} and node 2 is the midpoint {R1.A, R2.B}.
    """
    elements = (
        make_element("VoltageSource", "V1", voltage),
        make_element("Resistor", "R1", r1),
        make_element("Resistor", "R2", r2),
    )
    connections = (
        wire("V1.B", "R1.B"),
        wire("R1.A", "R2.B"),
        wire("R2.A", "V1.A"),
    )
    return Schematic(elements=elements, connections=connections)


def vcvs_amplifier(input_voltage: float, gain: float, load=None) -> Schematic:
    """
    V1 drives the VCVS input; the output negative terminal shares V1's negative side.
    With `load`, a resistor RL is placed across the output.
    """
    elements = [
        make_element("VoltageSource", "V1", input_voltage),
        make_element("VCVS", "E1", gain),
    ]
    connections = [
        wire("V1.B", "E1.C"),
        wire("V1.A", "E1.D"),
        wire("E1.B", "V1.A"),
    ]
    if load is not None:
        elements.append(make_element("Resistor", "RL", load))
        connections += [wire("E1.A", "RL.B"), wire("E1.B", "RL.A")]
    return Schematic(elements=tuple(elements), connections=tuple(connections))


@pytest.fixture
def resistor_loop() -> Schematic:
    return single_resistor_loop()


@pytest.fixture
def divider() -> Schematic:
    return series_divider(12.0, 1000.0, 2000.0)
