import numpy as np
import pytest
from pygreenhouse import (
    LayersModel,
    LayersModelConfig,
    TemperatureUnits,
    WavelengthBand,
    default_layer_altitudes,
)
from pygreenhouse import constants as const
from pygreenhouse.diagnostics import is_energy_conserved


def test_default_stack_layout():
    model = LayersModel()
    assert len(model.layers) == 1 + const.MAX_ATMOSPHERE_LAYERS
    assert model.ground is model.layers[0]
    assert model.ground.altitude == 0.0
    alts = [layer.altitude for layer in model.layers]
    assert alts == sorted(alts)
    np.testing.assert_allclose(alts[1:], default_layer_altitudes(const.MAX_ATMOSPHERE_LAYERS))
    assert [layer.index for layer in model.layers] == list(range(len(model.layers)))
    assert model.active_layer_count == 1
    assert model.sun.is_shining is False
    assert model.is_running is False
    assert model.temperature_units is TemperatureUnits.CELSIUS


@pytest.mark.parametrize("dt", [0.0, -0.5])
def test_step_rejects_non_positive_dt(dt):
    model = LayersModel()
    with pytest.raises(ValueError):
        model.step(dt)


@pytest.mark.parametrize(
    "altitudes",
    [
        [10_000.0, 10_000.0],  # duplicate
        [20_000.0, 10_000.0],  # unordered
        [0.0, 10_000.0],  # at the ground
        [10_000.0, const.HEIGHT_OF_ATMOSPHERE],  # at the top
        [float("nan")],
    ],
)
def test_invalid_layer_altitudes_raise(altitudes):
    with pytest.raises(ValueError):
        LayersModel(LayersModelConfig(initial_active_layers=0), layer_altitudes=altitudes)


def test_custom_altitudes_and_active_count_check():
    model = LayersModel(LayersModelConfig(initial_active_layers=2), layer_altitudes=[5_000.0, 20_000.0])
    assert [layer.altitude for layer in model.atmosphere_layers] == [5_000.0, 20_000.0]
    with pytest.raises(ValueError):
        LayersModel(LayersModelConfig(initial_active_layers=3), layer_altitudes=[5_000.0, 20_000.0])


@pytest.mark.parametrize("count", [-1, 4, 1.5])
def test_invalid_layer_count_raises(count):
    model = LayersModel()
    with pytest.raises(ValueError):
        model.set_active_layer_count(count)


def test_set_active_layer_count_toggles_layers():
    model = LayersModel()
    model.set_active_layer_count(3)
    assert [layer.is_active for layer in model.atmosphere_layers] == [True, True, True]
    model.set_active_layer_count(0)
    assert model.active_layers == [model.ground]


def test_absorption_mutators_validate():
    model = LayersModel()
    with pytest.raises(ValueError):
        model.set_layer_absorption(0, WavelengthBand.VISIBLE, 0.5)
    with pytest.raises(ValueError):
        model.set_layer_absorption(7, WavelengthBand.INFRARED, 0.5)
    with pytest.raises(ValueError):
        model.set_layer_absorption(1, WavelengthBand.INFRARED, 1.5)
    with pytest.raises(ValueError):
        model.set_infrared_absorption(-0.1)
    model.set_layer_absorption(2, WavelengthBand.VISIBLE, 0.25)
    assert model.layers[2].absorption_proportion(WavelengthBand.VISIBLE) == 0.25
    model.set_infrared_absorption(0.3)
    assert all(layer.absorption_proportion(WavelengthBand.INFRARED) == 0.3 for layer in model.atmosphere_layers)


def test_source_packet_reaches_ground_after_transit(ground_only_model):
    model = ground_only_model
    dt = 0.5
    n_transit = int(const.HEIGHT_OF_ATMOSPHERE / (const.PACKET_SPEED * dt))
    for _ in range(n_transit - 1):
        model.step(dt)
    assert model.surface_temperature == 0.0
    np.testing.assert_allclose(
        np.sort(model.packet_positions()),
        const.HEIGHT_OF_ATMOSPHERE - const.PACKET_SPEED * dt * np.arange(n_transit - 1, 0, -1),
    )
    model.step(dt)
    expected = const.OUTPUT_ENERGY_RATE * dt / model.config.ground_heat_capacity
    assert np.isclose(model.surface_temperature, expected)


def test_emission_lag_of_one_step(ground_only_model):
    model = ground_only_model
    dt = 0.5
    n_transit = int(const.HEIGHT_OF_ATMOSPHERE / (const.PACKET_SPEED * dt))
    for _ in range(n_transit):
        model.step(dt)
    # the ground was still at 0 K when it emitted, so no infrared yet
    assert not [p for p in model.packets if p.band is WavelengthBand.INFRARED]

    model.step(dt)
    fresh = [p for p in model.packets if p.band is WavelengthBand.INFRARED]
    assert len(fresh) == 1
    assert fresh[0].altitude == 0.0
    assert fresh[0].emitted_by == 0

    model.step(dt)
    assert fresh[0].altitude == const.PACKET_SPEED * dt
    assert fresh[0].emitted_by is None


def test_escaped_energy_and_rates(ground_only_model):
    model = ground_only_model
    model.run(20.0, dt=0.5)
    assert model.cumulative_escaped > 0.0
    assert model.net_energy_out_rate > 0.0
    assert np.isclose(model.net_energy_in_rate, const.OUTPUT_ENERGY_RATE)
    assert model.net_inflow_of_energy > 0.0
    assert not model.in_radiative_balance
    assert is_energy_conserved(model)


def test_tick_respects_running_flag_and_max_dt():
    model = LayersModel(LayersModelConfig(max_dt=0.25))
    assert model.tick(1.0) is False
    assert model.t_seconds == 0.0
    model.start()
    assert model.tick(1.0) is True
    assert model.t_seconds == 0.25
    model.tick(0.1)
    assert np.isclose(model.t_seconds, 0.35)
    model.pause()
    assert model.tick(1.0) is False
    model.set_running(True)
    assert model.is_running


def test_run_counts_steps():
    model = LayersModel()
    assert model.run(5.0, dt=0.5) == 10
    assert np.isclose(model.t_seconds, 5.0)


def test_dark_model_is_in_balance_and_cold():
    model = LayersModel()
    model.run(10.0)
    assert model.in_radiative_balance
    assert model.packets == []
    np.testing.assert_array_equal(model.temperatures(), 0.0)


def test_temperature_units():
    model = LayersModel(LayersModelConfig(default_temperature_units="K"))
    assert model.surface_temperature_in() == 0.0
    assert np.isclose(model.surface_temperature_in("F"), -459.67)
    model.set_temperature_units(TemperatureUnits.CELSIUS)
    assert np.isclose(model.surface_temperature_in(), -273.15)
    with pytest.raises(ValueError):
        model.set_temperature_units("R")


def test_deactivating_a_warm_layer_keeps_ledger_closed():
    model = LayersModel(LayersModelConfig(initial_active_layers=2))
    model.set_source_shining(True)
    model.set_layer_absorption(1, WavelengthBand.VISIBLE, 0.3)
    model.run(30.0)
    held = model.layers[1].retained_energy + model.layers[2].retained_energy
    assert model.layers[1].temperature > 0.0
    model.set_active_layer_count(0)
    assert model.layers[1].temperature == 0.0
    assert model.layers[1].retained_energy == 0.0
    assert model.state.retired == pytest.approx(held)
    model.run(10.0)
    assert is_energy_conserved(model)


def test_multiplier_mutator_clamps():
    model = LayersModel()
    assert model.set_source_output_multiplier(3.0) == const.OUTPUT_PROPORTION_RANGE[1]


def test_diag_prints_layer_messages(capsys):
    model = LayersModel(LayersModelConfig(diag=True, initial_active_layers=0, at_equilibrium_time=1.0))
    model.set_active_layer_count(2)
    model.run(2.0)
    out = capsys.readouterr().out
    assert "[Layers] active atmosphere layers: 2" in out
    assert "reached equilibrium" in out


def test_non_finite_multiplier_rejected_before_stepping(ground_only_model):
    model = ground_only_model
    with pytest.raises(ValueError):
        model.set_source_output_multiplier(float("nan"))
    model.run(10.0)
    assert is_energy_conserved(model)


@pytest.mark.parametrize("dt", [0.0, -0.5])
def test_run_rejects_non_positive_dt(dt):
    model = LayersModel()
    with pytest.raises(ValueError):
        model.run(5.0, dt=dt)


def test_in_rate_matches_source_when_dt_does_not_divide_window(ground_only_model):
    model = ground_only_model
    model.run(20.0, dt=0.37)
    assert np.isclose(model.net_energy_in_rate, const.OUTPUT_ENERGY_RATE)
