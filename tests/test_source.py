import numpy as np
import pytest
from pygreenhouse import constants as const
from pygreenhouse.model import SimulationState
from pygreenhouse.packets import EnergyDirection, WavelengthBand
from pygreenhouse.source import SunEnergySource


def test_dark_source_produces_nothing():
    sun = SunEnergySource()
    state = SimulationState()
    assert sun.produce_energy(0.5, state) == 0.0
    assert state.packets == []
    assert sun.get_output_energy_rate() == 0.0
    assert sun.get_average_output_rate() == 0.0


def test_shining_source_appends_visible_packet_at_top():
    sun = SunEnergySource(surface_area=2.0, initially_shining=True)
    state = SimulationState()
    energy = sun.produce_energy(0.5, state)
    assert np.isclose(energy, const.OUTPUT_ENERGY_RATE * 2.0 * 0.5)
    assert len(state.packets) == 1
    packet = state.packets[0]
    assert packet.band is WavelengthBand.VISIBLE
    assert packet.direction is EnergyDirection.DOWN
    assert packet.altitude == const.HEIGHT_OF_ATMOSPHERE
    assert packet.emitted_by is None
    assert np.isclose(packet.energy, energy)
    # tracker saw the sample
    assert np.isclose(sun.get_average_output_rate(), energy / 1.0)


def test_output_rate_is_instantaneous_and_scaled():
    sun = SunEnergySource(initially_shining=True)
    assert sun.get_output_energy_rate() == const.OUTPUT_ENERGY_RATE
    sun.set_proportionate_output_rate(1.5)
    assert np.isclose(sun.get_output_energy_rate(), 1.5 * const.OUTPUT_ENERGY_RATE)
    sun.set_shining(False)
    assert sun.get_output_energy_rate() == 0.0


def test_multiplier_is_clamped_to_range():
    sun = SunEnergySource()
    lo, hi = const.OUTPUT_PROPORTION_RANGE
    assert sun.set_proportionate_output_rate(10.0) == hi
    assert sun.set_proportionate_output_rate(0.0) == lo
    assert sun.set_proportionate_output_rate(1.25) == 1.25


def test_reset_restores_defaults():
    sun = SunEnergySource(initially_shining=False)
    sun.set_shining(True)
    sun.set_proportionate_output_rate(2.0)
    sun.produce_energy(0.5, SimulationState())
    sun.reset()
    assert sun.is_shining is False
    assert sun.proportionate_output_rate == 1.0
    assert len(sun.output_energy_rate_tracker) == 0


@pytest.mark.parametrize("value", [float("nan"), float("inf"), -float("inf")])
def test_non_finite_multiplier_raises(value):
    sun = SunEnergySource(initially_shining=True)
    with pytest.raises(ValueError):
        sun.set_proportionate_output_rate(value)
    assert sun.proportionate_output_rate == 1.0
