# tests/test_dc_solve.py
import logging
import math

import pytest

from dcsim_core import SolveRunError
from dcsim_core.components import make_element
from dcsim_core.data_structures import Connection, Schematic
from dcsim_core.simulation import (
    EngineConfig, MnaInputError, SolveStatus, SolverResult, solve, solve_schematic,
)
from dcsim_core.simulation.engine import DCSolveEngine
from dcsim_core.topology import GROUND_NODE_ID

from tests.conftest import series_divider, single_resistor_loop, vcvs_amplifier, wire


def terminal_voltage(result: SolverResult, terminal_id: str) -> float:
    return result.node_voltages[result.topology.node_of(terminal_id)]


def mixed_circuit() -> Schematic:
    """
    A source driving a divider, a current source loading the midpoint and a VCVS
    buffering the midpoint into its own load.
    """
    elements = (
        make_element("VoltageSource", "V1", 9.0),
        make_element("Resistor", "R1", 330.0),
        make_element("Resistor", "R2", 470.0),
        make_element("CurrentSource", "I1", 0.002),
        make_element("VCVS", "E1", 2.5),
        make_element("Resistor", "RL", 1200.0),
    )
    connections = (
        wire("V1.B", "R1.B"),
        wire("R1.A", "R2.B"),
        wire("R2.A", "V1.A"),
        wire("I1.A", "V1.A"),
        wire("I1.B", "R2.B"),
        wire("E1.C", "R2.B"),
        wire("E1.D", "V1.A"),
        wire("E1.B", "V1.A"),
        wire("E1.A", "RL.B"),
        wire("RL.A", "V1.A"),
    )
    return Schematic(elements, connections)


class TestNothingToSolve:

    def test_zero_elements_gives_empty_maps(self):
        result = solve([], [])
        assert result.status == SolveStatus.NOTHING_TO_SOLVE
        assert result.node_voltages == {}
        assert result.element_currents == {}
        assert result.element_power == {}
        assert result.is_empty
        assert not result.is_solved

    def test_zero_non_ground_nodes_gives_empty_maps(self):
        r1 = make_element("Resistor", "R1", 10.0)
        result = solve([r1], [wire("R1.A", "R1.B")])
        assert result.status == SolveStatus.NOTHING_TO_SOLVE
        assert result.is_empty
        assert result.topology is not None
        assert result.topology.num_nodes == 1


class TestBasicCircuits:

    @pytest.mark.parametrize("voltage, resistance", [(10.0, 1000.0), (5.0, 47.0), (-3.3, 2.2e6)])
    def test_single_resistor(self, voltage, resistance):
        result = solve_schematic(single_resistor_loop(voltage, resistance))
        assert result.is_solved
        assert result.node_voltages[1] == pytest.approx(voltage, abs=1e-9)
        assert result.element_currents["R1"] == pytest.approx(voltage / resistance, abs=1e-9)
        assert result.element_power["R1"] == pytest.approx(voltage ** 2 / resistance, rel=1e-9)

    def test_ground_voltage_exactly_zero(self):
        for schematic in (single_resistor_loop(), series_divider(5.0, 1.0, 3.0), vcvs_amplifier(1.0, 4.0), mixed_circuit()):
            result = solve_schematic(schematic)
            assert result.node_voltages[GROUND_NODE_ID] == 0.0

    @pytest.mark.parametrize("r1, r2", [(1000.0, 2000.0), (100.0, 100.0), (4.7e3, 330.0)])
    def test_series_divider(self, r1, r2):
        voltage = 12.0
        result = solve_schematic(series_divider(voltage, r1, r2))
        current = voltage / (r1 + r2)
        assert result.element_currents["R1"] == pytest.approx(current, rel=1e-9)
        assert result.element_currents["R2"] == pytest.approx(current, rel=1e-9)
        assert terminal_voltage(result, "R1.A") == pytest.approx(voltage * r2 / (r1 + r2), rel=1e-9)

    @pytest.mark.parametrize("gain", [0.5, 1.0, 2.0, 10.0, -3.0])
    def test_vcvs_open_output(self, gain):
        input_voltage = 1.5
        result = solve_schematic(vcvs_amplifier(input_voltage, gain))
        dv_in = terminal_voltage(result, "E1.C") - terminal_voltage(result, "E1.D")
        dv_out = terminal_voltage(result, "E1.A") - terminal_voltage(result, "E1.B")
        assert dv_in == pytest.approx(input_voltage, abs=1e-9)
        assert dv_out == pytest.approx(gain * dv_in, abs=1e-9)
        assert result.element_currents["E1"] == pytest.approx(0.0, abs=1e-9)

    def test_vcvs_drives_load(self):
        result = solve_schematic(vcvs_amplifier(2.0, 3.0, load=600.0))
        assert terminal_voltage(result, "E1.A") == pytest.approx(6.0, abs=1e-9)
        assert result.element_currents["E1"] == pytest.approx(0.01, rel=1e-9)
        assert result.element_power["E1"] == pytest.approx(-0.06, rel=1e-9)
        assert result.element_power["RL"] == pytest.approx(0.06, rel=1e-9)

    def test_floating_element_reads_zero(self):
        base = single_resistor_loop()
        schematic = Schematic(base.elements + (make_element("Resistor", "R9", 10.0),), base.connections)
        result = solve_schematic(schematic)
        assert result.is_solved
        assert result.element_currents["R9"] == pytest.approx(0.0, abs=1e-12)
        assert "TOPO_FLOATING_NODE" in {issue.code for issue in result.issues}

    def test_connection_pairs_accepted(self):
        v1 = make_element("VoltageSource", "V1", 1.0)
        r1 = make_element("Resistor", "R1", 1.0)
        result = solve([v1, r1], [("V1.B", "R1.B"), ("V1.A", "R1.A"), ("V1.A", None)])
        assert result.element_currents["R1"] == pytest.approx(1.0)


class TestSignConventions:

    def test_voltage_source_supplies(self):
        result = solve_schematic(single_resistor_loop(10.0, 1000.0))
        assert result.element_currents["V1"] == pytest.approx(0.01, rel=1e-9)
        assert result.element_power["V1"] == pytest.approx(-0.1, rel=1e-9)

    def test_reversed_resistor_current_is_negative(self):
        v1 = make_element("VoltageSource", "V1", 10.0)
        r1 = make_element("Resistor", "R1", 1000.0)
        result = solve([v1, r1], [wire("V1.B", "R1.A"), wire("V1.A", "R1.B")])
        assert result.element_currents["R1"] == pytest.approx(-0.01, rel=1e-9)
        assert result.element_power["R1"] == pytest.approx(0.1, rel=1e-9)

    def test_current_source_into_resistor(self):
        i1 = make_element("CurrentSource", "I1", 1e-3)
        r1 = make_element("Resistor", "R1", 1000.0)
        # Ground {I1.A, R1.B}; the source pushes 1 mA out of its head (I1.A) through R1.
        result = solve([i1, r1], [wire("I1.A", "R1.B"), wire("I1.B", "R1.A")])
        assert terminal_voltage(result, "I1.B") == pytest.approx(-1.0, rel=1e-9)
        assert result.element_currents["I1"] == 1e-3
        assert result.element_currents["R1"] == pytest.approx(1e-3, rel=1e-9)
        assert result.element_power["I1"] == pytest.approx(-1e-3, rel=1e-9)
        assert result.element_power["R1"] == pytest.approx(1e-3, rel=1e-9)

    @pytest.mark.parametrize("schematic_factory", [
        lambda: single_resistor_loop(7.0, 220.0),
        lambda: series_divider(24.0, 1e3, 3.3e3),
        lambda: series_divider(5.0, 0.0, 1e3),
        lambda: vcvs_amplifier(0.7, -12.0, load=50.0),
        mixed_circuit,
    ])
    def test_power_balance(self, schematic_factory):
        result = solve_schematic(schematic_factory())
        total = sum(result.element_power.values())
        scale = sum(abs(p) for p in result.element_power.values())
        assert abs(total) <= 1e-8 * max(scale, 1.0)

    def test_resistor_power_never_negative(self):
        result = solve_schematic(mixed_circuit())
        for element_id in ("R1", "R2", "RL"):
            assert result.element_power[element_id] >= 0.0


class TestOhmsLawRoundTrip:

    @pytest.mark.parametrize("schematic_factory", [
        lambda: single_resistor_loop(3.0, 10.0),
        lambda: series_divider(9.0, 220.0, 680.0),
        lambda: series_divider(5.0, 0.0, 1e4),
        lambda: vcvs_amplifier(1.0, 5.0, load=75.0),
        mixed_circuit,
    ])
    def test_current_times_resistance_equals_drop(self, schematic_factory):
        schematic = schematic_factory()
        result = solve_schematic(schematic)
        assert result.is_solved
        for element in schematic.elements:
            if element.kind.value != "Resistor":
                continue
            drop = terminal_voltage(result, element.positive_terminal) - terminal_voltage(result, element.negative_terminal)
            assert result.element_currents[element.element_id] * element.resistance == pytest.approx(drop, abs=1e-9)


class TestSingularSystems:

    def test_contradictory_sources(self):
        v1 = make_element("VoltageSource", "V1", 5.0)
        v2 = make_element("VoltageSource", "V2", 10.0)
        result = solve([v1, v2], [wire("V1.B", "V2.B"), wire("V1.A", "V2.A")])
        assert result.status == SolveStatus.SINGULAR_SYSTEM
        assert result.is_singular
        assert result.is_empty
        assert "SOLVE_SINGULAR_SYSTEM" in {issue.code for issue in result.issues}
        assert "Singular Matrix" in result.diagnostic_report
        assert result.anomaly is None

    def test_voltage_source_loop_through_short_wire(self):
        v1 = make_element("VoltageSource", "V1", 5.0)
        result = solve([v1], [wire("V1.A", "V1.B")])
        # Both terminals collapse into ground: nothing left to solve.
        assert result.status == SolveStatus.NOTHING_TO_SOLVE

    def test_vcvs_loop_without_reference(self):
        # E1 controls itself with unity gain: V(out) = 1 * V(out) leaves V(out) undetermined.
        e1 = make_element("VCVS", "E1", 1.0)
        result = solve([e1], [wire("E1.A", "E1.C"), wire("E1.B", "E1.D")])
        assert result.status == SolveStatus.SINGULAR_SYSTEM
        assert result.node_voltages == {}

    def test_singular_error_logged(self, caplog):
        v1 = make_element("VoltageSource", "V1", 1.0)
        v2 = make_element("VoltageSource", "V2", 2.0)
        with caplog.at_level(logging.ERROR):
            solve([v1, v2], [wire("V1.B", "V2.B"), wire("V1.A", "V2.A")])
        assert "no unique solution" in caplog.text


class TestIdealShorts:

    @pytest.mark.parametrize("r2", [1e4, 1e3, 47.0])
    def test_short_in_series_carries_the_loop_current(self, r2):
        result = solve_schematic(series_divider(5.0, 0.0, r2))
        assert result.is_solved
        assert not result.is_anomalous
        currents = result.element_currents
        assert currents["R2"] == pytest.approx(5.0 / r2, rel=1e-6)
        assert currents["R1"] == pytest.approx(currents["R2"], rel=1e-6)
        assert currents["V1"] == pytest.approx(currents["R2"], rel=1e-6)
        assert result.node_voltages[2] == pytest.approx(5.0, abs=1e-9)
        assert result.element_power["R1"] >= 0.0

    def test_parallel_shorts_across_source_saturate(self):
        elements = (
            make_element("VoltageSource", "V1", 1.0),
            make_element("Resistor", "R1", 0.0),
            make_element("Resistor", "R2", 0.0),
        )
        connections = (
            wire("V1.B", "R1.B"), wire("R1.B", "R2.B"),
            wire("V1.A", "R1.A"), wire("R1.A", "R2.A"),
        )
        result = solve(elements, connections)
        assert result.is_solved
        assert result.is_anomalous
        assert result.anomaly.saturated_elements == frozenset({"V1", "R1", "R2"})
        assert result.element_currents["R1"] == pytest.approx(result.element_currents["R2"], rel=1e-6)
        assert result.element_currents["V1"] == pytest.approx(2.0 * result.element_currents["R1"], rel=1e-6)


class TestNonFiniteResults:

    def test_infinite_source_is_anomalous_not_singular(self):
        schematic = single_resistor_loop(math.inf, 1000.0)
        result = solve_schematic(schematic)
        assert result.status == SolveStatus.SOLVED
        assert not result.is_singular
        assert result.is_anomalous
        assert result.anomaly.has_non_finite_voltage
        assert result.anomaly.topology_suspect
        assert result.anomaly.suspect_element_ids == frozenset({"V1", "R1"})
        assert result.anomaly.suspect_connections == schematic.connections
        assert "ANOMALY_NON_FINITE_VOLTAGE" in {issue.code for issue in result.issues}

    def test_infinite_current_source_is_anomalous(self):
        elements = (make_element("CurrentSource", "I1", math.inf), make_element("Resistor", "R1", 10.0))
        result = solve(elements, [wire("I1.A", "R1.A"), wire("I1.B", "R1.B")])
        assert result.is_solved
        assert result.anomaly.has_non_finite_voltage


class TestFailureConversion:

    def test_input_error_becomes_result(self, monkeypatch):
        def refuse(self):
            raise MnaInputError(element_id="R1", details="cannot stamp")

        monkeypatch.setattr("dcsim_core.simulation.engine.MnaAssembler.assemble", refuse)
        result = solve_schematic(single_resistor_loop())
        assert result.status == SolveStatus.INPUT_ERROR
        assert result.is_empty
        assert result.issues[-1].code == "SOLVE_INPUT_ERROR"
        assert result.issues[-1].element_id == "R1"
        assert "cannot stamp" in result.diagnostic_report

    def test_unexpected_error_wrapped(self, monkeypatch):
        def explode(self):
            raise RuntimeError("boom")

        monkeypatch.setattr(DCSolveEngine, "execute", explode)
        with pytest.raises(SolveRunError, match="boom") as excinfo:
            solve_schematic(single_resistor_loop())
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_invalid_snapshot_raises_before_solving(self):
        from dcsim_core.components import ElementDefinitionError
        r1 = make_element("Resistor", "R1", 1.0)
        with pytest.raises(ElementDefinitionError, match="Duplicate element id"):
            solve([r1, r1], [])

    def test_result_is_independent_of_previous_calls(self):
        schematic = series_divider(10.0, 1.0, 1.0)
        first = solve_schematic(schematic)
        solve_schematic(single_resistor_loop(99.0, 3.0))
        second = solve_schematic(schematic)
        assert first.node_voltages == second.node_voltages
        assert first.element_currents == second.element_currents


class TestEngineConfig:

    def test_saturation_limit_from_config(self):
        result = solve_schematic(single_resistor_loop(10.0, 1000.0), EngineConfig(saturation_current=1e-3))
        assert result.is_anomalous
        assert result.anomaly.saturated_elements == frozenset({"V1", "R1"})

    def test_zero_resistance_current_set_by_large_conductance(self):
        result = solve_schematic(single_resistor_loop(1.0, 0.0), EngineConfig(large_conductance=1e6))
        assert result.element_currents["R1"] == pytest.approx(1e6, rel=1e-6)
        assert result.element_currents["V1"] == pytest.approx(1e6, rel=1e-6)
        assert math.isfinite(result.element_power["R1"])
